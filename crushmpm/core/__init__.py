# 文件: crushmpm/core/__init__.py
"""
crushmpm 核心模块

导出本构模型、物质点状态和组件
"""

# ==============================================================================
# 材料系统
# ==============================================================================
from .materials import (
    # 核心接口
    ConstitutiveModel,
    StressResult,
    SimulationContext,

    # 状态
    MaterialPoint,

    # 异常
    MaterialParameterError,
    ParameterStreamError,
    ReturnMappingError,

    # 工厂
    MaterialFactory,

    # 预置模型
    LinearElastic,
    SinfoniettaClassica,
    SinfoniettaCrush,

    # 辅助函数
    tensor_to_voigt,
    voigt_to_tensor,
)


__all__ = [
    'ConstitutiveModel',
    'StressResult',
    'SimulationContext',
    'MaterialPoint',
    'MaterialParameterError',
    'ParameterStreamError',
    'ReturnMappingError',
    'MaterialFactory',
    'LinearElastic',
    'SinfoniettaClassica',
    'SinfoniettaCrush',
    'tensor_to_voigt',
    'voigt_to_tensor',
]
