# 文件: crushmpm/core/materials/factory.py
"""
材料工厂模块

按注册名选择本构模型变体，提供统一的创建与反序列化入口。
"""

from typing import IO, Any, Dict, Optional, Tuple, Type

from .errors import ParameterStreamError
from .interfaces import ConstitutiveModel
from .models.linear_elastic import LinearElastic
from .models.sinfonietta import SinfoniettaClassica, SinfoniettaCrush
from ...utils.param_reader import TokenReader


class MaterialFactory:
    """
    材料工厂

    根据注册名和属性字典创建本构模型，或从参数流读取。

    Example:
        # 从属性字典创建
        mat = MaterialFactory.create('Sand', {
            'model': 'SinfoniettaCrush',
            'young': 200e6,
            'poisson': 0.2,
            'pc0': 1e5,
        })

        # 使用便捷方法
        mat = MaterialFactory.create_crush(young=200e6, poisson=0.2, phi_star0=0.4)

        # 从参数流读取
        with open('sand.txt') as f:
            mat = MaterialFactory.read(f)

    MaterialFactory 的注册表为进程内全局共享，register 对其后的所有调用可见。
    子类创建时复制一份注册表，子类上的 register 不影响基类。
    """

    _registry: Dict[str, Type[ConstitutiveModel]] = {
        LinearElastic.REGISTRATION_NAME: LinearElastic,
        SinfoniettaClassica.REGISTRATION_NAME: SinfoniettaClassica,
        SinfoniettaCrush.REGISTRATION_NAME: SinfoniettaCrush,
    }

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._registry = dict(cls._registry)

    @classmethod
    def register(cls, model_cls: Type[ConstitutiveModel]) -> Type[ConstitutiveModel]:
        """注册新的模型变体 (可作类装饰器使用)"""
        cls._registry[model_cls.REGISTRATION_NAME] = model_cls
        return model_cls

    @classmethod
    def registered_names(cls) -> Tuple[str, ...]:
        return tuple(sorted(cls._registry))

    @classmethod
    def model_class(cls, model_name: str) -> Type[ConstitutiveModel]:
        try:
            return cls._registry[model_name]
        except KeyError:
            raise ValueError(
                f"Unknown constitutive model '{model_name}'. "
                f"Registered: {', '.join(cls.registered_names())}"
            ) from None

    @classmethod
    def create(cls, name: str, props: Dict[str, Any]) -> ConstitutiveModel:
        """
        根据属性字典创建本构模型

        Args:
            name: 材料名称 (用于错误消息)
            props: 材料属性字典，结构:
                {
                    'model': str,       # 注册名 (必需)
                    'young': float,     # 杨氏模量 (必需)
                    'poisson': float,   # 泊松比 (必需)
                    ...                 # 其余参数，缺省时使用模型默认值
                }

        Returns:
            ConstitutiveModel

        Raises:
            ValueError: 缺少必需参数或注册名未知
            MaterialParameterError: 参数未知或超出有效范围
        """
        model_name = props.get('model')
        young = props.get('young')
        poisson = props.get('poisson')

        if model_name is None or young is None or poisson is None:
            raise ValueError(
                f"Material '{name}' missing required parameters. "
                f"Got model={model_name}, young={young}, poisson={poisson}"
            )

        model_cls = cls.model_class(model_name)
        params = {k: v for k, v in props.items() if k != 'model'}
        return model_cls(**params)

    @staticmethod
    def create_elastic(young: float, poisson: float) -> LinearElastic:
        return LinearElastic(young=young, poisson=poisson)

    @staticmethod
    def create_classica(young: float = 200.0e6, poisson: float = 0.2, **params) -> SinfoniettaClassica:
        return SinfoniettaClassica(young=young, poisson=poisson, **params)

    @staticmethod
    def create_crush(young: float = 200.0e6, poisson: float = 0.2, **params) -> SinfoniettaCrush:
        return SinfoniettaCrush(young=young, poisson=poisson, **params)

    @classmethod
    def read(cls, stream: IO[str], reader: Optional[TokenReader] = None) -> ConstitutiveModel:
        """
        从参数流读取一个模型: 先读注册名，再由对应变体读取参数

        同一个 reader 可连续读取多个模型。

        Raises:
            ParameterStreamError: 注册名未知、流提前结束或参数非数值
        """
        reader = reader or TokenReader(stream)
        token = reader.next_token('model name')
        if token not in cls._registry:
            raise ParameterStreamError('model name', token)
        model = cls._registry[token]()
        model.read_parameters(reader)
        return model

    @classmethod
    def read_all(cls, stream: IO[str]) -> list:
        """读取流中的全部模型"""
        reader = TokenReader(stream)
        models = []
        while reader.peek() is not None:
            models.append(cls.read(stream, reader))
        return models
