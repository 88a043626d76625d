# 文件: crushmpm/solver/point_cloud.py
"""
物质点集合

最小化的宿主仿真上下文 (SimulationContext 实现): 保存物质点及其本步应变增量。
网格传递和动量积分不在本项目范围内，应变增量由调用者直接给定。
"""

from typing import Iterable, List, Optional

import numpy as np

from ..core.materials.state import MaterialPoint


class PointCloud:
    """
    物质点集合

    各点更新互不耦合，update_all 逐点调用本构模型。

    Example:
        cloud = PointCloud([MaterialPoint() for _ in range(4)])
        cloud.init_all(model)
        cloud.set_strain_increment(0, d_eps)
        results = cloud.update_all(model)
    """

    def __init__(self, points: Optional[Iterable[MaterialPoint]] = None):
        self.points: List[MaterialPoint] = list(points or [])
        self.strain_increments: List[np.ndarray] = [np.zeros((3, 3)) for _ in self.points]

    def __len__(self) -> int:
        return len(self.points)

    def add_point(self, point: MaterialPoint, strain_increment: Optional[np.ndarray] = None) -> int:
        """添加物质点，返回其索引"""
        self.points.append(point)
        self.strain_increments.append(np.zeros((3, 3)))
        p = len(self.points) - 1
        if strain_increment is not None:
            self.set_strain_increment(p, strain_increment)
        return p

    def get_point(self, p: int) -> MaterialPoint:
        return self.points[p]

    def get_strain_increment(self, p: int) -> np.ndarray:
        return self.strain_increments[p]

    def set_strain_increment(self, p: int, strain_increment: np.ndarray) -> None:
        d_eps = np.asarray(strain_increment, dtype=float)
        if d_eps.shape != (3, 3):
            raise ValueError(f"Strain increment must be a (3,3) tensor, got shape {d_eps.shape}")
        self.strain_increments[p] = d_eps.copy()

    def set_uniform_increment(self, strain_increment: np.ndarray) -> None:
        for p in range(len(self.points)):
            self.set_strain_increment(p, strain_increment)

    def init_all(self, model) -> None:
        for point in self.points:
            model.init(point)

    def update_all(self, model) -> list:
        """
        对全部物质点执行一次应力更新

        Raises:
            ReturnMappingError: 某点不收敛 (携带该点索引，之前的点已更新)
        """
        return [model.update_strain_and_stress(self, p) for p in range(len(self.points))]
