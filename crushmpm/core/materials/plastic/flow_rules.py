# 文件: crushmpm/core/materials/plastic/flow_rules.py
"""
流动法则模块

提供:
- NonAssociatedFlow: 以 beta 控制屈服面法向体积部分的非关联流动
"""

import numpy as np

from .yield_functions import CamCapYield, mean_pressure


class NonAssociatedFlow:
    """
    非关联流动法则

        ∂g/∂σ = 3 s /(z² pc²) - w (2p - pc)/(3 pc²) I
        w = beta/3 + (1 - beta/3) ψ,   ψ = min(|2p - pc| / pc, 1)

    - beta 控制临界状态附近 (p = pc/2) 的剪胀/压缩比例
    - 向帽顶 (p >= pc) 和顶点 (p <= 0) 过渡为关联流动 (ψ = 1)，
      这两处偏量方向为零，只能由体积流动承担塑性变形
    - p = pc/2 处体积项本身为零，w 的变化不引起方向跳跃
    - beta = 3: 处处关联 (与 CamCapYield.gradient 相同)
    - beta = 0: 临界状态处纯偏量流动，帽侧 (p > pc/2) 仍保留压缩分量

    Example:
        flow = NonAssociatedFlow(yield_fn, beta=2.0)
        m = flow.direction(stress, pc)
    """

    ASSOCIATED_BETA = 3.0

    def __init__(self, yield_fn: CamCapYield, beta: float):
        if beta < 0:
            raise ValueError(f"Non-associativity factor beta must be non-negative, got {beta}")
        self.yield_fn = yield_fn
        self.beta = float(beta)

    @property
    def is_associated(self) -> bool:
        return self.beta == self.ASSOCIATED_BETA

    def volumetric_scale(self, stress: np.ndarray, q: float) -> float:
        """体积部分的缩放系数 w (beta = 3 时恒为 1)"""
        ratio = self.beta / self.ASSOCIATED_BETA
        if ratio == 1.0:
            return 1.0
        p = mean_pressure(stress)
        psi = min(abs(2.0 * p - q) / q, 1.0)
        return ratio + (1.0 - ratio) * psi

    def direction(self, stress: np.ndarray, q: float) -> np.ndarray:
        """
        塑性流动方向 (工程 Voigt 形式)

        Args:
            stress: 应力 Voigt 向量 (6,)
            q: 硬化变量 pc

        Returns:
            m: 流动方向 (6,)，塑性应变增量 ΔEp = Δλ m
        """
        return self.yield_fn.scaled_gradient(stress, q, self.volumetric_scale(stress, q))

    def __repr__(self) -> str:
        return f"NonAssociatedFlow(beta={self.beta})"
