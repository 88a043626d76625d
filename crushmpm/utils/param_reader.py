# 文件: crushmpm/utils/param_reader.py
"""
参数文本流读取

材料参数以空白分隔的记号序列保存: 模型注册名后接按固定顺序排列的标量。
'#' 之后到行尾为注释。
"""

from typing import IO, Iterator, Optional, Sequence

from ..core.materials.errors import ParameterStreamError


class TokenReader:
    """
    从文本流按需读取记号 (不会越过当前模型需要的记号)

    Example:
        reader = TokenReader(stream)
        reader.expect('SinfoniettaCrush')
        young = reader.read_float('young')
    """

    def __init__(self, stream: IO[str]):
        self._tokens = self._iter_tokens(stream)
        self._peeked: Optional[str] = None

    @staticmethod
    def _iter_tokens(stream: IO[str]) -> Iterator[str]:
        for line in stream:
            content = line.split('#', 1)[0]
            yield from content.split()

    def peek(self) -> Optional[str]:
        """查看下一个记号而不消耗 (流结束时返回 None)"""
        if self._peeked is None:
            self._peeked = next(self._tokens, None)
        return self._peeked

    def next_token(self, field: str) -> str:
        """
        读取下一个记号

        Raises:
            ParameterStreamError: 流已结束
        """
        token = self.peek()
        if token is None:
            raise ParameterStreamError(field)
        self._peeked = None
        return token

    def expect(self, name: str) -> str:
        """读取并核对模型注册名"""
        token = self.next_token('model name')
        if token != name:
            raise ParameterStreamError('model name', token)
        return token

    def read_float(self, field: str) -> float:
        """读取一个浮点数，非数值记号报告字段名"""
        token = self.next_token(field)
        try:
            return float(token)
        except ValueError:
            raise ParameterStreamError(field, token) from None

    def read_floats(self, field_names: Sequence[str]) -> list:
        """按顺序读取多个浮点数"""
        return [self.read_float(name) for name in field_names]


def format_parameters(name: str, values: Sequence[float]) -> str:
    """
    格式化一行参数: 注册名 + repr 浮点数 (保证读回完全一致)
    """
    return ' '.join([name] + [repr(float(v)) for v in values]) + '\n'
