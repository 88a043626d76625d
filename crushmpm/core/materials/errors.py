# 文件: crushmpm/core/materials/errors.py
"""
材料系统异常

- MaterialParameterError: 参数非法 (构造或反序列化时)，对该模型实例是致命的
- ParameterStreamError: 参数流格式错误 (提前结束或非数值记号)
- ReturnMappingError: 返回映射不收敛，交由外部步进循环决定细分/减步/终止
"""


class MaterialParameterError(ValueError):
    """材料参数超出有效范围"""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid parameter '{field}' = {value!r}: {reason}")


class ParameterStreamError(ValueError):
    """参数流无法解析"""

    def __init__(self, field: str, token=None):
        self.field = field
        self.token = token
        if token is None:
            msg = f"Unexpected end of stream while reading '{field}'"
        else:
            msg = f"Malformed value for '{field}': {token!r}"
        super().__init__(msg)


class ReturnMappingError(RuntimeError):
    """
    返回映射在迭代上限内未达到屈服容差

    Attributes:
        point_index: 物质点索引 (未知时为 None)
        iterations: 终止时的迭代次数
        residual: 终止时的 |f|
    """

    def __init__(self, iterations: int, residual: float, point_index=None, reason: str = "not converged"):
        self.point_index = point_index
        self.iterations = iterations
        self.residual = residual
        self.reason = reason
        super().__init__(self._message())

    def _message(self) -> str:
        where = "?" if self.point_index is None else self.point_index
        return (
            f"Return mapping failed at point {where}: {self.reason} "
            f"after {self.iterations} iterations (|f| = {self.residual:.3e})"
        )

    def at_point(self, point_index: int) -> 'ReturnMappingError':
        """补充物质点索引 (求解器本身不知道索引)"""
        self.point_index = point_index
        self.args = (self._message(),)
        return self
