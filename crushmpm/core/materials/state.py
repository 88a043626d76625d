# 文件: crushmpm/core/materials/state.py
"""
物质点状态管理

MaterialPoint: 物质点的状态容器，存储应力和历史变量
"""

from dataclasses import dataclass, field
import numpy as np

from .interfaces import stress_to_tensor, voigt_to_tensor


@dataclass
class MaterialPoint:
    """
    物质点状态容器

    由宿主的粒子集合创建和销毁，只由本构模型在更新时修改。

    Attributes:
        stress: 应力 Voigt 向量 [σxx, σyy, σzz, σyz, σxz, σxy]
        plastic_strain: 塑性应变 Voigt 向量 (工程剪应变)
        pc: 前期固结压力 (硬化变量)
        phi_star: 可释放孔隙率
        delta_lambda: 最近一步的塑性乘子
        is_plastic: 最近一步是否发生塑性修正

    Example:
        point = MaterialPoint()
        model.init(point)
        saved = point.copy()  # 步进失败时用于回滚
    """

    # 应力状态 (Voigt 向量)
    stress: np.ndarray = field(default_factory=lambda: np.zeros(6))

    # 张量内变量
    plastic_strain: np.ndarray = field(default_factory=lambda: np.zeros(6))

    # 标量内变量
    pc: float = 0.0
    phi_star: float = 0.0

    # 最近一步的诊断量
    delta_lambda: float = 0.0
    is_plastic: bool = False

    def __post_init__(self):
        self.stress = np.asarray(self.stress, dtype=float).copy()
        self.plastic_strain = np.asarray(self.plastic_strain, dtype=float).copy()
        if self.stress.shape != (6,) or self.plastic_strain.shape != (6,):
            raise ValueError("stress and plastic_strain must be Voigt vectors of shape (6,)")

    @property
    def mean_pressure(self) -> float:
        """平均压力 p = -tr(σ)/3 (压为正)"""
        return -float(self.stress[0] + self.stress[1] + self.stress[2]) / 3.0

    @property
    def plastic_volumetric_strain(self) -> float:
        """累积塑性体应变 εv_p = -tr(Ep) (压缩为正)"""
        return -float(self.plastic_strain[0] + self.plastic_strain[1] + self.plastic_strain[2])

    @property
    def stress_tensor(self) -> np.ndarray:
        return stress_to_tensor(self.stress)

    @property
    def plastic_strain_tensor(self) -> np.ndarray:
        return voigt_to_tensor(self.plastic_strain, engineering=True)

    def copy(self) -> 'MaterialPoint':
        """
        深拷贝

        Returns:
            MaterialPoint: 独立的状态副本
        """
        return MaterialPoint(
            stress=self.stress.copy(),
            plastic_strain=self.plastic_strain.copy(),
            pc=self.pc,
            phi_star=self.phi_star,
            delta_lambda=self.delta_lambda,
            is_plastic=self.is_plastic
        )

    def assign(self, other: 'MaterialPoint') -> None:
        """原地复制另一状态 (宿主持有的对象引用保持不变)"""
        self.stress = other.stress.copy()
        self.plastic_strain = other.plastic_strain.copy()
        self.pc = other.pc
        self.phi_star = other.phi_star
        self.delta_lambda = other.delta_lambda
        self.is_plastic = other.is_plastic

    def reset(self) -> None:
        """重置为零状态"""
        self.stress = np.zeros(6)
        self.plastic_strain = np.zeros(6)
        self.pc = 0.0
        self.phi_star = 0.0
        self.delta_lambda = 0.0
        self.is_plastic = False

    def __repr__(self) -> str:
        return (
            f"MaterialPoint(p={self.mean_pressure:.4e}, pc={self.pc:.4e}, "
            f"phi*={self.phi_star:.4f}, epv={self.plastic_volumetric_strain:.4e})"
        )
