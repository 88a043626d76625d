# 文件: crushmpm/core/materials/__init__.py
"""
crushmpm 材料系统

分层架构:
- interfaces.py: 抽象基类和协议
- errors.py: 异常
- state.py: 物质点状态
- elastic/: 弹性模型组件
- plastic/: 塑性模型组件 (屈服函数、流动法则、硬化规律、过渡函数、返回映射)
- models/: 预置本构模型
- factory.py: 材料工厂

使用方法:
    from crushmpm.core.materials import MaterialFactory, MaterialPoint

    # 创建材料
    model = MaterialFactory.create_crush(
        young=200e6, poisson=0.2, pc0=1e5, phi_star0=0.4, ginf=0.1
    )

    # 初始化物质点
    point = MaterialPoint()
    model.init(point)

    # 宿主每步调用
    result = model.update_strain_and_stress(context, p)
    print(result.stress)       # 应力 Voigt 向量
    print(result.is_plastic)   # 是否塑性
    print(point.phi_star)      # 可释放孔隙率

扩展指南:
    添加新本构模型:
        1. 在 models/ 目录添加新文件
        2. 继承 ConstitutiveModel，设置 REGISTRATION_NAME
        3. 用 MaterialFactory.register 注册
"""

# 核心接口
from .interfaces import (
    ConstitutiveModel,
    StressResult,
    ElasticModel,
    YieldFunction,
    FlowRule,
    HardeningLaw,
    SimulationContext,
    tensor_to_voigt,
    voigt_to_tensor,
    stress_to_tensor,
    tensor_to_stress,
    symmetrize,
)

# 异常
from .errors import MaterialParameterError, ParameterStreamError, ReturnMappingError

# 状态管理
from .state import MaterialPoint

# 弹性组件
from .elastic import IsotropicElastic

# 塑性组件
from .plastic import (
    CamCapYield,
    NonAssociatedFlow,
    CompactionHardening,
    LinearToPlateau,
    ClosestPointReturn,
    ReturnMappingResult,
    friction_coefficient,
)

# 预置模型
from .models import (
    ElasticParameters,
    CapParameters,
    CrushParameters,
    LinearElastic,
    SinfoniettaClassica,
    SinfoniettaCrush,
)

# 工厂
from .factory import MaterialFactory


__all__ = [
    # 核心接口
    'ConstitutiveModel',
    'StressResult',
    'ElasticModel',
    'YieldFunction',
    'FlowRule',
    'HardeningLaw',
    'SimulationContext',

    # 辅助函数
    'tensor_to_voigt',
    'voigt_to_tensor',
    'stress_to_tensor',
    'tensor_to_stress',
    'symmetrize',

    # 异常
    'MaterialParameterError',
    'ParameterStreamError',
    'ReturnMappingError',

    # 状态
    'MaterialPoint',

    # 弹性组件
    'IsotropicElastic',

    # 塑性组件
    'CamCapYield',
    'NonAssociatedFlow',
    'CompactionHardening',
    'LinearToPlateau',
    'ClosestPointReturn',
    'ReturnMappingResult',
    'friction_coefficient',

    # 预置模型
    'ElasticParameters',
    'CapParameters',
    'CrushParameters',
    'LinearElastic',
    'SinfoniettaClassica',
    'SinfoniettaCrush',

    # 工厂
    'MaterialFactory',
]
