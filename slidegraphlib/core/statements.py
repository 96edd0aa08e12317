#!/usr/bin/env python3

from typing import NamedTuple
from slidegraphlib.core import utils

#============================================

class FilterOp(NamedTuple):
	"""
	One ffmpeg filter with ordered parameters. A parameter key of None
	renders the value positionally; a raw op renders its name verbatim.
	"""
	name: str
	params: tuple = ()
	raw: bool = False

	#============================
	def render(self) -> str:
		if self.raw or len(self.params) == 0:
			return self.name
		parts = []
		for key, value in self.params:
			text = value if isinstance(value, str) else utils.format_number(value)
			if key is None:
				parts.append(text)
			else:
				parts.append(f"{key}={text}")
		return f"{self.name}=" + ':'.join(parts)

#============================================

class FilterStatement(NamedTuple):
	"""
	A filtergraph chain: input labels, one or more filters, output labels.
	"""
	inputs: tuple
	ops: tuple
	outputs: tuple

	#============================
	@property
	def operation(self) -> str:
		return ','.join(op.name for op in self.ops)

	#============================
	def render(self) -> str:
		in_text = ''.join(f"[{label}]" for label in self.inputs)
		out_text = ''.join(f"[{label}]" for label in self.outputs)
		chain = ','.join(op.render() for op in self.ops)
		return f"{in_text}{chain}{out_text}"

	#============================
	def to_dict(self) -> dict:
		return {
			'inputs': list(self.inputs),
			'operation': self.operation,
			'filters': [op.render() for op in self.ops],
			'outputs': list(self.outputs),
		}

#============================================

def statement(inputs, name: str, params=(), outputs=()) -> FilterStatement:
	return FilterStatement(tuple(inputs), (FilterOp(name, tuple(params)),),
		tuple(outputs))

#============================================

def render_filtergraph(statements) -> str:
	return ';'.join(item.render() for item in statements)
