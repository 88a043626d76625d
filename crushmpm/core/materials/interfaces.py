# 文件: crushmpm/core/materials/interfaces.py
"""
材料系统核心接口定义

设计原则:
1. ConstitutiveModel: 所有本构模型的抽象基类，定义宿主 MPM 程序调用的统一能力集
   {init, update_strain_and_stress, read, write, get_young, get_poisson,
    get_registration_name}
2. StressResult: 标准化的应力更新返回值
3. Protocol: 组件接口 (弹性、屈服、流动、硬化、宿主上下文)，使用鸭子类型实现松耦合

约定:
- 应力 Voigt 向量 (张量分量): [σxx, σyy, σzz, σyz, σxz, σxy]，拉为正
- 应变 Voigt 向量 (工程分量): [εxx, εyy, εzz, γyz, γxz, γxy]
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import IO, Optional, Protocol, Tuple, runtime_checkable
import numpy as np


@dataclass
class StressResult:
    """
    统一的应力更新结果

    Attributes:
        stress: 应力 Voigt 向量 (6,)
        tangent: 切线模量 (6,6)，非关联流动时不对称
        state: 更新后的物质点状态
        is_plastic: 是否发生塑性修正
        delta_lambda: 本步塑性乘子 Δλ (弹性步为 0)
        iterations: 返回映射迭代次数
        yield_value: 提交状态下的屈服函数值 f
    """
    stress: np.ndarray
    tangent: np.ndarray
    state: Optional[object] = None
    is_plastic: bool = False
    delta_lambda: float = 0.0
    iterations: int = 0
    yield_value: float = 0.0


class ConstitutiveModel(ABC):
    """
    本构模型抽象基类

    宿主程序只通过以下能力集与模型交互，模型变体在配置阶段按注册名选择:
    - get_registration_name(): 模型注册名
    - read() / write(): 参数的文本序列化
    - init(): 初始化物质点的历史变量
    - update_strain_and_stress(): 单点单步应力更新
    - get_young() / get_poisson(): 供宿主估计稳定时间步

    Example:
        model = SinfoniettaCrush(young=200e6, poisson=0.2)
        model.init(point)
        result = model.update_strain_and_stress(context, p)
    """

    @abstractmethod
    def get_registration_name(self) -> str:
        """返回模型注册名"""
        pass

    @abstractmethod
    def read(self, stream: IO[str]) -> None:
        """
        从文本流读取参数 (注册名 + 按固定顺序排列的标量参数)

        Raises:
            ParameterStreamError: 流提前结束或出现非数值记号
            MaterialParameterError: 参数超出有效范围
        """
        pass

    @abstractmethod
    def write(self, stream: IO[str]) -> None:
        """将注册名与参数写入文本流"""
        pass

    @abstractmethod
    def init(self, point) -> None:
        """在第一次更新前设置物质点的初始历史变量"""
        pass

    @abstractmethod
    def update_strain_and_stress(self, context: 'SimulationContext', p: int) -> StressResult:
        """
        对第 p 个物质点执行一次应力更新

        Args:
            context: 宿主仿真上下文 (提供应变增量和物质点)
            p: 物质点索引

        Returns:
            StressResult: 更新结果 (物质点状态已被原地修改)
        """
        pass

    @abstractmethod
    def get_young(self) -> float:
        pass

    @abstractmethod
    def get_poisson(self) -> float:
        pass

    def p_wave_modulus(self) -> float:
        """
        纵波模量 M = E(1-ν) / ((1+ν)(1-2ν))

        宿主用于 CFL 稳定时间步估计: dt <= h / sqrt(M / ρ)
        """
        E, nu = self.get_young(), self.get_poisson()
        return E * (1 - nu) / ((1 + nu) * (1 - 2 * nu))

    def wave_speed(self, density: float) -> float:
        """弹性纵波波速 c = sqrt(M / ρ)"""
        if density <= 0:
            raise ValueError(f"Density must be positive, got {density}")
        return float(np.sqrt(self.p_wave_modulus() / density))


# =============================================================================
# 组件协议 (Protocol for duck typing)
# =============================================================================

@runtime_checkable
class ElasticModel(Protocol):
    """
    弹性模型协议

    - mu / K: 剪切模量、体积模量
    - D: 弹性矩阵 (6,6)
    - compute_stress(): 计算弹性应力
    """

    @property
    def mu(self) -> float:
        ...

    @property
    def K(self) -> float:
        ...

    @property
    def D(self) -> np.ndarray:
        ...

    def compute_stress(self, strain_voigt: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        ...


@runtime_checkable
class YieldFunction(Protocol):
    """
    屈服函数协议

    - evaluate(stress, q): f <= 0 为容许状态
    - gradient(stress, q): ∂f/∂σ (工程 Voigt 形式，剪切分量加倍)
    - gradient_q(stress, q): ∂f/∂q
    """

    def evaluate(self, stress: np.ndarray, q: float) -> float:
        ...

    def gradient(self, stress: np.ndarray, q: float) -> np.ndarray:
        ...

    def gradient_q(self, stress: np.ndarray, q: float) -> float:
        ...


@runtime_checkable
class FlowRule(Protocol):
    """
    流动法则协议 (塑性势梯度 ∂g/∂σ)

    非关联流动时 direction() 与屈服面法向不同。
    """

    def direction(self, stress: np.ndarray, q: float) -> np.ndarray:
        ...


@runtime_checkable
class HardeningLaw(Protocol):
    """
    硬化律协议

    - rate(stress, q, plastic_strain, flow_dir): 单位塑性乘子对应的 dq
    """

    def rate(
        self,
        stress: np.ndarray,
        q: float,
        plastic_strain: np.ndarray,
        flow_dir: np.ndarray
    ) -> float:
        ...


@runtime_checkable
class SimulationContext(Protocol):
    """
    宿主仿真上下文协议

    本构核心只需要按索引取得应变增量和物质点 (应力通过物质点原地写回)。
    """

    def get_strain_increment(self, p: int) -> np.ndarray:
        """第 p 个物质点本步的应变增量张量 (3,3)"""
        ...

    def get_point(self, p: int):
        """第 p 个物质点 (MaterialPoint)"""
        ...

    def __len__(self) -> int:
        ...


# =============================================================================
# 辅助函数
# =============================================================================

def tensor_to_voigt(T: np.ndarray, engineering: bool = True) -> np.ndarray:
    """
    将 3x3 对称张量转换为 Voigt 向量

    Args:
        T: 对称张量 (3,3)
        engineering: True 返回工程形式 [T11,T22,T33,2T23,2T13,2T12]
                    False 返回张量形式 [T11,T22,T33,T23,T13,T12]
    """
    factor = 2.0 if engineering else 1.0
    return np.array([
        T[0, 0], T[1, 1], T[2, 2],
        factor * T[1, 2], factor * T[0, 2], factor * T[0, 1]
    ], dtype=float)


def voigt_to_tensor(v: np.ndarray, engineering: bool = True) -> np.ndarray:
    """
    将 Voigt 向量转换为 3x3 对称张量

    Args:
        v: Voigt 向量 (6,)
        engineering: True 输入为工程形式，False 输入为张量形式
    """
    factor = 0.5 if engineering else 1.0
    return np.array([
        [v[0], factor * v[5], factor * v[4]],
        [factor * v[5], v[1], factor * v[3]],
        [factor * v[4], factor * v[3], v[2]]
    ], dtype=float)


def stress_to_tensor(s: np.ndarray) -> np.ndarray:
    """将应力 Voigt 向量转换为 3x3 张量 (应力不需要因子)"""
    return voigt_to_tensor(s, engineering=False)


def tensor_to_stress(T: np.ndarray) -> np.ndarray:
    """将 3x3 应力张量转换为 Voigt 向量"""
    return tensor_to_voigt(T, engineering=False)


def symmetrize(T: np.ndarray) -> np.ndarray:
    """取对称部分 (T + T^T) / 2，宿主给出的应变增量可能含数值上的反对称噪声"""
    T = np.asarray(T, dtype=float)
    return 0.5 * (T + T.T)
