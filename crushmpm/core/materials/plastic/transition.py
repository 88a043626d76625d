# 文件: crushmpm/core/materials/plastic/transition.py
"""
过渡函数模块

提供:
- LinearToPlateau: 从线性起始段平滑过渡到平台值的标量函数，
  用于由累积塑性体应变直接给出可释放孔隙率 φ*

φ* 是累积历史的纯函数 (而不是增量积分)，反复小步积分不会产生漂移。
"""

import numpy as np


class LinearToPlateau:
    """
    线性-平台过渡函数

        b(x) = y0                                 x <= x0
        b(x) = y0 + (yinf - y0) * tanh((x - x0)/l0)   x > x0

    - 在 x0 处以斜率 (yinf - y0)/l0 线性起始
    - x 超过 x0 若干个 l0 后趋于平台 yinf (导数 -> 0)
    - 单调、连续，取值始终在 [min(y0, yinf), max(y0, yinf)] 内

    Attributes:
        x0: 起始阈值 (epv0)
        y0: 初始值 (phiStar0)
        yinf: 平台值 (ginf)
        l0: 过渡长度尺度

    Example:
        b = LinearToPlateau(x0=0.01, y0=0.4, yinf=0.1, l0=0.001)
        phi_star = b(0.012)
    """

    def __init__(self, x0: float, y0: float, yinf: float, l0: float):
        if l0 <= 0:
            raise ValueError(f"Transition length l0 must be positive, got {l0}")
        self.x0 = float(x0)
        self.y0 = float(y0)
        self.yinf = float(yinf)
        self.l0 = float(l0)

    @property
    def lower(self) -> float:
        return min(self.y0, self.yinf)

    @property
    def upper(self) -> float:
        return max(self.y0, self.yinf)

    @property
    def initial_slope(self) -> float:
        """x0 处的右导数"""
        return (self.yinf - self.y0) / self.l0

    def value(self, x):
        """计算 b(x)，支持标量和 numpy 数组"""
        x = np.asarray(x, dtype=float)
        u = np.maximum(x - self.x0, 0.0) / self.l0
        y = self.y0 + (self.yinf - self.y0) * np.tanh(u)
        # tanh 的舍入可能越过平台
        y = np.clip(y, self.lower, self.upper)
        return float(y) if y.ndim == 0 else y

    __call__ = value

    def derivative(self, x):
        """计算 db/dx (x <= x0 时为 0)"""
        x = np.asarray(x, dtype=float)
        u = (x - self.x0) / self.l0
        d = np.where(u > 0.0, self.initial_slope / np.cosh(np.minimum(u, 350.0)) ** 2, 0.0)
        return float(d) if d.ndim == 0 else d

    def inverse(self, y):
        """
        反函数: 满足 b(x) = y 的最小 x

        y == y0 时返回 x0，y == yinf 时返回 inf。

        Raises:
            ValueError: y 不在 [min(y0, yinf), max(y0, yinf)] 内
        """
        y = np.asarray(y, dtype=float)
        if np.any(y < self.lower) or np.any(y > self.upper):
            raise ValueError(
                f"Value outside transition range [{self.lower}, {self.upper}]: {y}"
            )
        if self.yinf == self.y0:
            x = np.full(y.shape, self.x0)
        else:
            r = (y - self.y0) / (self.yinf - self.y0)
            with np.errstate(divide='ignore'):
                x = self.x0 + self.l0 * np.arctanh(r)
        return float(x) if x.ndim == 0 else x

    def __repr__(self) -> str:
        return (
            f"LinearToPlateau(x0={self.x0:.3e}, y0={self.y0:.4f}, "
            f"yinf={self.yinf:.4f}, l0={self.l0:.3e})"
        )
