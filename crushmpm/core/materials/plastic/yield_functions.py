# 文件: crushmpm/core/materials/plastic/yield_functions.py
"""
屈服函数模块

提供:
- 应力不变量辅助函数: mean_pressure, deviatoric, deviatoric_norm
- CamCapYield: 由摩擦斜率 z 控制的锥面与由 pc 控制的帽面组成的闭合屈服面

约定: 应力拉为正，平均压力 p = -tr(σ)/3 压为正。
梯度以工程 Voigt 形式返回 (剪切分量加倍)，可直接与应力 Voigt 向量做内积，
也可直接左乘弹性矩阵 D。
"""

import numpy as np

# 体积方向 m = [1,1,1,0,0,0]
_M = np.array([1.0, 1.0, 1.0, 0.0, 0.0, 0.0])


def friction_coefficient(varphi_deg: float) -> float:
    """
    由临界状态摩擦角计算三轴压缩下的应力比 z = 6 sinφ / (3 - sinφ)
    """
    s = np.sin(np.radians(varphi_deg))
    return 6.0 * s / (3.0 - s)


def mean_pressure(stress: np.ndarray) -> float:
    """平均压力 p = -(σxx + σyy + σzz)/3"""
    return -(stress[0] + stress[1] + stress[2]) / 3.0


def deviatoric(stress: np.ndarray) -> np.ndarray:
    """
    偏应力 s = σ + p I (张量分量 Voigt 向量)
    """
    p = mean_pressure(stress)
    s = np.array(stress, dtype=float)
    s[:3] += p
    return s


def deviatoric_norm(stress: np.ndarray) -> float:
    """
    等效偏应力 qd = √(3/2 s:s)

    Voigt 中剪切分量存储的是张量分量，s:s 中计两次。
    """
    s = deviatoric(stress)
    ss = s[0]**2 + s[1]**2 + s[2]**2 + 2.0 * (s[3]**2 + s[4]**2 + s[5]**2)
    return float(np.sqrt(1.5 * ss))


def _engineering(s: np.ndarray) -> np.ndarray:
    """张量分量 -> 工程形式 (剪切分量加倍)"""
    v = s.copy()
    v[3:] *= 2.0
    return v


class CamCapYield:
    """
    锥-帽屈服函数 (归一化的修正剑桥形式)

        f(σ, pc) = qd² / (z² pc²) + (p/pc)² - p/pc

    - p = 0 (顶点) 与 p = pc (帽顶) 处闭合
    - p = pc/2 处达到临界状态线 qd = z p
    - 拉应力状态 (p < 0) 均不容许
    - 以 pc 归一化后 f 无量纲，屈服容差可取绝对值 (1e-8)

    Attributes:
        z: 摩擦系数 (由 varphi 换算)
        epsilon_pressure: 压力下限，用于应力比等需要除以 p 的量

    Example:
        yield_fn = CamCapYield(z=friction_coefficient(30.0))
        f = yield_fn.evaluate(stress, q=pc)
        if f > tol:
            n = yield_fn.gradient(stress, pc)
    """

    def __init__(self, z: float, epsilon_pressure: float = 1e-13):
        if z <= 0:
            raise ValueError(f"Friction coefficient z must be positive, got {z}")
        self.z = float(z)
        self.epsilon_pressure = float(epsilon_pressure)

    def invariants(self, stress: np.ndarray):
        """返回 (p, qd)"""
        return mean_pressure(stress), deviatoric_norm(stress)

    def evaluate(self, stress: np.ndarray, q: float) -> float:
        """
        计算屈服函数值

        Args:
            stress: 应力 Voigt 向量 (6,)
            q: 硬化变量 pc (> 0)

        Returns:
            f: f <= 0 弹性或位于屈服面上，f > 0 需要塑性修正
        """
        p, qd = self.invariants(stress)
        a = p / q
        return (qd / (self.z * q))**2 + a * a - a

    def gradient(self, stress: np.ndarray, q: float) -> np.ndarray:
        """
        ∂f/∂σ = 3 s /(z² pc²) - (2p - pc)/(3 pc²) I
        """
        return self.scaled_gradient(stress, q, volumetric_scale=1.0)

    def gradient_q(self, stress: np.ndarray, q: float) -> float:
        """
        ∂f/∂pc = -2 qd²/(z² pc³) - 2 p²/pc³ + p/pc²
        """
        p, qd = self.invariants(stress)
        return (-2.0 * qd * qd / (self.z * self.z) - 2.0 * p * p + p * q) / q**3

    def stress_ratio(self, stress: np.ndarray) -> float:
        """
        应力比 η = qd / max(p, ε)

        p 接近零或为负时锥面几何退化，用压力下限替代。
        """
        p, qd = self.invariants(stress)
        return qd / max(p, self.epsilon_pressure)

    def critical_deviator(self, p: float) -> float:
        """临界状态线上的偏应力 qd = z p"""
        return self.z * p

    def scaled_gradient(self, stress: np.ndarray, q: float, volumetric_scale: float) -> np.ndarray:
        """体积部分乘以 volumetric_scale 的梯度 (非关联流动方向使用)"""
        p = mean_pressure(stress)
        s = deviatoric(stress)
        n = _engineering(3.0 * s / (self.z * self.z * q * q))
        n -= volumetric_scale * (2.0 * p - q) / (3.0 * q * q) * _M
        return n

    def __repr__(self) -> str:
        return f"CamCapYield(z={self.z:.4f})"
