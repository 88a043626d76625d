# 文件: crushmpm/__init__.py
"""
crushmpm: 可破碎颗粒材料的物质点本构更新

- core: 本构模型与组件
- solver: 宿主侧辅助 (物质点集合、应变路径驱动)
- utils: 参数文本流读写
"""

from .core import (
    ConstitutiveModel,
    MaterialFactory,
    MaterialPoint,
    LinearElastic,
    SinfoniettaClassica,
    SinfoniettaCrush,
    MaterialParameterError,
    ParameterStreamError,
    ReturnMappingError,
)

__version__ = '0.1.0'

__all__ = [
    'ConstitutiveModel',
    'MaterialFactory',
    'MaterialPoint',
    'LinearElastic',
    'SinfoniettaClassica',
    'SinfoniettaCrush',
    'MaterialParameterError',
    'ParameterStreamError',
    'ReturnMappingError',
]
