# 文件: crushmpm/solver/__init__.py
"""
宿主侧辅助模块

- point_cloud: 物质点集合 (SimulationContext 的最小实现)
- strain_driver: 单点应变路径驱动 (含 Cutback 细分)
"""

from .point_cloud import PointCloud
from .strain_driver import StrainPathDriver, isotropic_path, oedometric_path, shear_path

__all__ = [
    'PointCloud',
    'StrainPathDriver',
    'isotropic_path',
    'oedometric_path',
    'shear_path',
]
