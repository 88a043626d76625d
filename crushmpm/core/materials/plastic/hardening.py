# 文件: crushmpm/core/materials/plastic/hardening.py
"""
硬化规律模块

提供:
- CompactionHardening: 由塑性压缩 (以及可选的剪切) 驱动的 pc 硬化，
  可与颗粒破碎的孔隙率过渡函数耦合

扩展指南:
    要添加新的硬化模型，只需创建一个类实现:
    - rate(stress, q, plastic_strain, flow_dir) -> float
"""

from typing import Optional

import numpy as np

from .transition import LinearToPlateau
from .yield_functions import CamCapYield


def volumetric_part(direction: np.ndarray) -> float:
    """工程 Voigt 应变的体积部分 -tr (压缩为正)"""
    return -float(direction[0] + direction[1] + direction[2])


def deviatoric_part(direction: np.ndarray) -> float:
    """
    工程 Voigt 应变的等效偏应变 √(2/3 e:e)
    """
    e = np.array(direction, dtype=float)
    e[3:] *= 0.5
    e[:3] -= (e[0] + e[1] + e[2]) / 3.0
    ee = e[0]**2 + e[1]**2 + e[2]**2 + 2.0 * (e[3]**2 + e[4]**2 + e[5]**2)
    return float(np.sqrt(2.0 / 3.0 * ee))


class CompactionHardening:
    """
    压缩硬化 (只硬化，不软化)

    单位塑性乘子对应的 pc 增量:

        h = c(Ep) / beta_p * ( max(dεv, 0) + kappa * min(η/z, 1) * dεq )

    其中 dεv, dεq 为流动方向的体积/偏量部分，η 为应力比，
    c(Ep) = φ*0 / φ*(εv_p) 为破碎系数: 可释放孔隙消耗得越多，硬化越强。
    未给定过渡函数时 c = 1。

    剪胀流动 (dεv < 0) 不降低 pc，因此 pc 单调不减。

    Attributes:
        beta_p: 塑性柔度 (1/H)
        kappa: 剪切硬化参数 (常为 0)
        transition: 孔隙率过渡函数 (可选)

    Example:
        hardening = CompactionHardening(yield_fn, beta_p=1e-6, kappa=0.0)
        dq = d_lambda * hardening.rate(stress, pc, Ep, m)
    """

    def __init__(
        self,
        yield_fn: CamCapYield,
        beta_p: float,
        kappa: float = 0.0,
        transition: Optional[LinearToPlateau] = None
    ):
        if beta_p <= 0:
            raise ValueError(f"Plastic compliance beta_p must be positive, got {beta_p}")
        if kappa < 0:
            raise ValueError(f"Shear hardening kappa must be non-negative, got {kappa}")
        if transition is not None and min(transition.y0, transition.yinf) <= 0:
            raise ValueError("Transition values must stay positive for the crushing factor")
        self.yield_fn = yield_fn
        self.beta_p = float(beta_p)
        self.kappa = float(kappa)
        self.transition = transition

    @property
    def modulus(self) -> float:
        """基础硬化模量 H = 1/beta_p"""
        return 1.0 / self.beta_p

    def porosity(self, plastic_strain: np.ndarray) -> Optional[float]:
        """当前塑性应变对应的可释放孔隙率 (无过渡函数时为 None)"""
        if self.transition is None:
            return None
        return self.transition(volumetric_part(plastic_strain))

    def crushing_factor(self, plastic_strain: np.ndarray) -> float:
        if self.transition is None:
            return 1.0
        return self.transition.y0 / self.porosity(plastic_strain)

    def rate(
        self,
        stress: np.ndarray,
        q: float,
        plastic_strain: np.ndarray,
        flow_dir: np.ndarray
    ) -> float:
        """
        硬化速率 dq/dλ

        Args:
            stress: 应力 Voigt 向量 (6,)
            q: 当前 pc
            plastic_strain: 当前累积塑性应变 (6,)
            flow_dir: 流动方向 ∂g/∂σ (6,)

        Returns:
            h >= 0
        """
        compaction = max(volumetric_part(flow_dir), 0.0)
        shear = 0.0
        if self.kappa > 0.0:
            mobilised = min(self.yield_fn.stress_ratio(stress) / self.yield_fn.z, 1.0)
            shear = self.kappa * mobilised * deviatoric_part(flow_dir)
        return self.crushing_factor(plastic_strain) * (compaction + shear) / self.beta_p

    def __repr__(self) -> str:
        return (
            f"CompactionHardening(beta_p={self.beta_p:.3e}, kappa={self.kappa}, "
            f"crushing={self.transition is not None})"
        )
