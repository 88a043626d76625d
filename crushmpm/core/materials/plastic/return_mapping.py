# 文件: crushmpm/core/materials/plastic/return_mapping.py
"""
返回映射算法模块

提供塑性修正算法:
- ClosestPointReturn: 以标量塑性乘子 Δλ 为未知量的 Newton 型最近点投影
  (切平面迭代)，适用于非关联流动与耦合硬化

扩展指南:
    要添加新的返回映射算法，只需创建一个类实现:
    - apply(stress_trial, q_old, plastic_strain_old) -> ReturnMappingResult
"""

import logging
from typing import NamedTuple

import numpy as np

from ..errors import ReturnMappingError

LOG = logging.getLogger(__name__)


class ReturnMappingResult(NamedTuple):
    """返回映射的结果"""

    stress: np.ndarray          # (6,) 修正后的应力
    tangent: np.ndarray         # (6,6) 弹塑性切线
    q: float                    # 更新后的硬化变量 pc
    plastic_strain: np.ndarray  # (6,) 更新后的累积塑性应变
    delta_lambda: float         # 本步塑性乘子 Δλ >= 0
    is_plastic: bool
    iterations: int
    yield_value: float          # 提交状态的 f


class ClosestPointReturn:
    """
    最近点投影返回映射 (Newton 迭代求 Δλ)

    给定违反 f <= yield_tol 的试探应力，寻找 (σ*, Δλ >= 0, q*) 使
        σ* = σ_trial - Δλ D : ∂g/∂σ
        q* = q + Δλ h
        |f(σ*, q*)| < yield_tol

    每次迭代在当前迭代点重新计算 ∂f/∂σ、∂g/∂σ、∂f/∂q 和 h，
    线性化一致性条件得到修正量:

        δλ = f / (∂f/∂σ : D : ∂g/∂σ - ∂f/∂q · h)
        σ <- σ - δλ D ∂g/∂σ,  q <- q + δλ h,  Ep <- Ep + δλ ∂g/∂σ

    迭代只存在于单次调用的局部变量中。

    Attributes:
        elastic: 弹性模型 (需提供 D)
        yield_fn: 屈服函数 (evaluate, gradient, gradient_q)
        flow: 流动法则 (direction)
        hardening: 硬化规律 (rate)
        yield_tol: 屈服容差
        max_iter: 迭代上限

    Example:
        rm = ClosestPointReturn(elastic, yield_fn, flow, hardening)
        result = rm.apply(stress_trial, pc, plastic_strain)
    """

    def __init__(self, elastic, yield_fn, flow, hardening, yield_tol: float = 1e-8, max_iter: int = 50):
        if yield_tol <= 0:
            raise ValueError(f"yield_tol must be positive, got {yield_tol}")
        if max_iter < 1:
            raise ValueError(f"max_iter must be at least 1, got {max_iter}")
        self.elastic = elastic
        self.yield_fn = yield_fn
        self.flow = flow
        self.hardening = hardening
        self.yield_tol = float(yield_tol)
        self.max_iter = int(max_iter)

    def apply(
        self,
        stress_trial: np.ndarray,
        q_old: float,
        plastic_strain_old: np.ndarray
    ) -> ReturnMappingResult:
        """
        执行返回映射

        Args:
            stress_trial: 弹性试探应力 (6,)
            q_old: 步初的硬化变量 pc
            plastic_strain_old: 步初的累积塑性应变 (6,)

        Returns:
            ReturnMappingResult

        Raises:
            ReturnMappingError: 迭代发散或超过上限
        """
        f_trial = self.yield_fn.evaluate(stress_trial, q_old)

        if f_trial <= self.yield_tol:
            # 弹性状态：无需修正
            return ReturnMappingResult(
                stress=np.array(stress_trial, dtype=float),
                tangent=self.elastic.D.copy(),
                q=q_old,
                plastic_strain=np.array(plastic_strain_old, dtype=float),
                delta_lambda=0.0,
                is_plastic=False,
                iterations=0,
                yield_value=f_trial
            )

        D = self.elastic.D
        stress = np.array(stress_trial, dtype=float)
        q = float(q_old)
        ep = np.array(plastic_strain_old, dtype=float)
        d_lambda = 0.0
        f = f_trial

        for it in range(1, self.max_iter + 1):
            n = self.yield_fn.gradient(stress, q)
            m = self.flow.direction(stress, q)
            f_q = self.yield_fn.gradient_q(stress, q)
            h = self.hardening.rate(stress, q, ep, m)

            Dm = D @ m
            denom = float(n @ Dm) - f_q * h
            if not np.isfinite(denom) or denom <= 0.0:
                raise ReturnMappingError(it, abs(f), reason=f"singular consistency denominator ({denom:.3e})")

            dl = f / denom
            stress = stress - dl * Dm
            q = q + dl * h
            ep = ep + dl * m
            d_lambda += dl

            f = self.yield_fn.evaluate(stress, q)
            if not np.isfinite(f):
                raise ReturnMappingError(it, np.inf, reason="non-finite yield value")

            if abs(f) < self.yield_tol:
                if d_lambda < 0.0:
                    raise ReturnMappingError(it, abs(f), reason=f"negative plastic multiplier ({d_lambda:.3e})")
                LOG.debug("return mapping converged in %d iterations (|f|=%.3e, dlambda=%.3e)", it, abs(f), d_lambda)
                tangent = self._compute_tangent(stress, q, ep)
                return ReturnMappingResult(
                    stress=stress,
                    tangent=tangent,
                    q=q,
                    plastic_strain=ep,
                    delta_lambda=d_lambda,
                    is_plastic=True,
                    iterations=it,
                    yield_value=f
                )

        raise ReturnMappingError(self.max_iter, abs(f))

    def _compute_tangent(self, stress: np.ndarray, q: float, ep: np.ndarray) -> np.ndarray:
        """
        弹塑性连续切线

        D^{ep} = D - (D m) ⊗ (n D) / (n : D : m - ∂f/∂q h)

        非关联流动 (beta != 3) 时不对称。
        """
        D = self.elastic.D
        n = self.yield_fn.gradient(stress, q)
        m = self.flow.direction(stress, q)
        h = self.hardening.rate(stress, q, ep, m)
        denom = float(n @ D @ m) - self.yield_fn.gradient_q(stress, q) * h
        if denom <= 0.0:
            return D.copy()
        return D - np.outer(D @ m, n @ D) / denom

    def __repr__(self) -> str:
        return (
            f"ClosestPointReturn(yield_fn={self.yield_fn}, flow={self.flow}, "
            f"hardening={self.hardening}, tol={self.yield_tol:.1e})"
        )
