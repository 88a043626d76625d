# 文件: crushmpm/core/materials/models/linear_elastic.py
"""
线弹性本构模型

宿主程序中与 Sinfonietta 族并列的最简变体，没有历史变量。
"""

from typing import IO

from ..interfaces import ConstitutiveModel, StressResult, symmetrize, tensor_to_voigt
from ..state import MaterialPoint
from ..elastic.isotropic import IsotropicElastic
from ....utils.param_reader import TokenReader, format_parameters
from .parameters import ElasticParameters


class LinearElastic(ConstitutiveModel):
    """
    各向同性线弹性 (Hooke)

    Example:
        model = LinearElastic(young=200e6, poisson=0.2)
        result = model.update_strain_and_stress(context, p)
    """

    REGISTRATION_NAME = 'HookeElasticity'
    PARAMETERS = ElasticParameters

    def __init__(self, young: float = 200.0e6, poisson: float = 0.2):
        self.params = ElasticParameters(young, poisson)
        self.elastic = IsotropicElastic(self.params.young, self.params.poisson)

    def set_parameters(self, params: ElasticParameters) -> None:
        self.params = params
        self.elastic.set_parameters(params.young, params.poisson)

    def get_registration_name(self) -> str:
        return self.REGISTRATION_NAME

    def get_young(self) -> float:
        return self.params.young

    def get_poisson(self) -> float:
        return self.params.poisson

    def read(self, stream: IO[str]) -> None:
        reader = stream if isinstance(stream, TokenReader) else TokenReader(stream)
        reader.expect(self.REGISTRATION_NAME)
        self.read_parameters(reader)

    def read_parameters(self, reader: TokenReader) -> None:
        values = reader.read_floats(ElasticParameters.field_names())
        self.set_parameters(ElasticParameters(*values))

    def write(self, stream: IO[str]) -> None:
        stream.write(format_parameters(self.REGISTRATION_NAME, self.params.values()))

    def init(self, point: MaterialPoint) -> None:
        """线弹性没有历史变量，只清零诊断量"""
        point.delta_lambda = 0.0
        point.is_plastic = False

    def update_strain_and_stress(self, context, p: int) -> StressResult:
        point = context.get_point(p)
        d_strain = tensor_to_voigt(symmetrize(context.get_strain_increment(p)), engineering=True)
        point.stress = self.elastic.update(point.stress, d_strain)
        return StressResult(
            stress=point.stress.copy(),
            tangent=self.elastic.D.copy(),
            state=point
        )

    def __repr__(self) -> str:
        return f"LinearElastic(E={self.params.young:.2e}, nu={self.params.poisson:.3f})"
