# 文件: crushmpm/core/materials/elastic/isotropic.py
"""
各向同性弹性模型

提供:
- IsotropicElastic: 各向同性线弹性 (Hooke's Law)，弹性矩阵惰性计算并缓存
"""

import numpy as np
from typing import Optional, Tuple

from ..errors import MaterialParameterError


def check_elastic_parameters(E: float, nu: float) -> None:
    """
    检查弹性常数范围

    Raises:
        MaterialParameterError: E <= 0 或 ν 不在 (-1, 0.5) 内
    """
    if not np.isfinite(E) or E <= 0:
        raise MaterialParameterError('young', E, "Young's modulus must be positive")
    if not np.isfinite(nu) or not (-1.0 < nu < 0.5):
        raise MaterialParameterError('poisson', nu, "Poisson's ratio must be in (-1, 0.5)")


class IsotropicElastic:
    """
    各向同性线弹性模型 (Hooke's Law)

    本构关系: Δσ = D : Δε

    弹性矩阵 D 为 6x6 矩阵，使用 Voigt 记号:
    [σxx, σyy, σzz, σyz, σxz, σxy]^T = D @ [εxx, εyy, εzz, γyz, γxz, γxy]^T

    D 只依赖 E 和 ν: 首次访问时计算，修改 E 或 ν 后失效重算。

    Attributes:
        E: 杨氏模量
        nu: 泊松比
        mu: 剪切模量 G = E / (2(1+ν))
        K: 体积模量 K = E / (3(1-2ν))
        lam: Lamé 第一参数 λ = Eν / ((1+ν)(1-2ν))
        D: 弹性矩阵 (6,6)

    Example:
        elastic = IsotropicElastic(E=200e6, nu=0.2)
        stress_new = elastic.update(stress, d_strain_voigt)
    """

    def __init__(self, E: float, nu: float):
        """
        Args:
            E: 杨氏模量 (Young's modulus)
            nu: 泊松比 (Poisson's ratio), 需满足 -1 < ν < 0.5

        Raises:
            MaterialParameterError: 参数超出有效范围
        """
        check_elastic_parameters(E, nu)
        self._E = float(E)
        self._nu = float(nu)
        self._D: Optional[np.ndarray] = None

    @property
    def E(self) -> float:
        return self._E

    @E.setter
    def E(self, value: float) -> None:
        check_elastic_parameters(value, self._nu)
        self._E = float(value)
        self._D = None

    @property
    def nu(self) -> float:
        return self._nu

    @nu.setter
    def nu(self, value: float) -> None:
        check_elastic_parameters(self._E, value)
        self._nu = float(value)
        self._D = None

    def set_parameters(self, E: float, nu: float) -> None:
        """同时修改 E 和 ν (避免中间状态的范围检查)"""
        check_elastic_parameters(E, nu)
        self._E = float(E)
        self._nu = float(nu)
        self._D = None

    @property
    def mu(self) -> float:
        """剪切模量 G"""
        return self._E / (2 * (1 + self._nu))

    @property
    def K(self) -> float:
        """体积模量 K"""
        return self._E / (3 * (1 - 2 * self._nu))

    @property
    def lam(self) -> float:
        """Lamé 第一参数 λ"""
        return self._E * self._nu / ((1 + self._nu) * (1 - 2 * self._nu))

    @property
    def D(self) -> np.ndarray:
        """弹性矩阵 (6,6)，只读缓存"""
        if self._D is None:
            self._D = self._build_D_matrix()
            self._D.setflags(write=False)
        return self._D

    def compute_stress(self, strain_voigt: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        计算弹性应力

        Args:
            strain_voigt: 工程应变 Voigt 向量 (6,)

        Returns:
            stress: 应力 Voigt 向量 (6,)
            tangent: 切线模量 (6,6)，对于弹性材料等于 D
        """
        stress = self.D @ strain_voigt
        return stress, self.D.copy()

    def update(self, stress: np.ndarray, d_strain_voigt: np.ndarray) -> np.ndarray:
        """
        弹性算子: σ_new = σ + D : Δε (不修改输入)
        """
        return stress + self.D @ d_strain_voigt

    def _build_D_matrix(self) -> np.ndarray:
        """
        构建 6x6 弹性矩阵

        | c1  c2  c2  0   0   0  |
        | c2  c1  c2  0   0   0  |
        | c2  c2  c1  0   0   0  |
        |  0   0   0  c3  0   0  |
        |  0   0   0   0  c3  0  |
        |  0   0   0   0   0  c3 |

        其中 c1 = λ + 2G, c2 = λ, c3 = G
        """
        lam, mu = self.lam, self.mu

        D = np.zeros((6, 6))
        D[:3, :3] = lam
        D[0, 0] = D[1, 1] = D[2, 2] = lam + 2 * mu
        D[3, 3] = D[4, 4] = D[5, 5] = mu

        return D

    def __repr__(self) -> str:
        return f"IsotropicElastic(E={self.E:.2e}, nu={self.nu:.3f})"
