#!/usr/bin/env python3

from decimal import Decimal
from typing import NamedTuple
from slidegraphlib.core import batching
from slidegraphlib.core import normalize
from slidegraphlib.core import registry
from slidegraphlib.core import statements
from slidegraphlib.core import utils

#============================================

OUTPUT_VIDEO = 'video'
OUTPUT_GIF = 'gif'
GIF_LABEL = 'outgif'

#============================================

class DecodeInput(NamedTuple):
	input_index: int
	source_ref: object
	kind: str
	options: tuple

	#============================
	def to_dict(self) -> dict:
		return {
			'index': self.input_index,
			'source': str(self.source_ref),
			'kind': self.kind,
			'options': {key: utils.format_number(value) for key, value in self.options},
		}

#============================================

class StageProgram(NamedTuple):
	stage_id: str
	level: int
	inputs: tuple
	statements: tuple
	output_label: str
	duration: Decimal
	is_final: bool

	#============================
	def filtergraph(self) -> str:
		return statements.render_filtergraph(self.statements)

	#============================
	def to_dict(self) -> dict:
		return {
			'stage': self.stage_id,
			'level': self.level,
			'final': self.is_final,
			'duration': utils.format_number(self.duration),
			'inputs': [item.to_dict() for item in self.inputs],
			'statements': [item.render() for item in self.statements],
			'output_label': self.output_label,
		}

#============================================

class FilterProgram(NamedTuple):
	stages: tuple
	output_labels: tuple
	timeline: tuple
	total_duration: Decimal
	output_kind: str

	#============================
	@property
	def final_stage(self) -> StageProgram:
		return self.stages[-1]

	#============================
	@property
	def map_label(self) -> str:
		return self.output_labels[-1]

	#============================
	def to_dict(self) -> dict:
		return {
			'output_kind': self.output_kind,
			'total_duration': utils.format_number(self.total_duration),
			'output_labels': list(self.output_labels),
			'timeline': [{
				'after': event.after_index,
				'effect': event.effect,
				'join': event.join,
				'engine_effect': event.engine_effect,
				'duration': utils.format_number(event.duration),
				'offset': utils.format_number(event.offset),
			} for event in self.timeline],
			'stages': [stage.to_dict() for stage in self.stages],
		}

#============================================

def decode_options(node: registry.MediaNode, lead_in: Decimal) -> tuple:
	if node.kind == registry.KIND_STILL:
		return (('loop', 1), ('t', node.duration + lead_in))
	return ()

#============================================

def palette_statements(source_label: str) -> tuple:
	return (
		statements.FilterStatement((source_label,),
			(statements.FilterOp('split'),), ('s0', 's1')),
		statements.statement(('s0',), 'palettegen', (('max_colors', 256),), ('p',)),
		statements.statement(('s1', 'p'), 'paletteuse',
			(('dither', 'bayer'), ('bayer_scale', 5)), (GIF_LABEL,)),
	)

#============================================

def emit_stage(stage: batching.StagePlan, target, output_kind: str) -> StageProgram:
	plan = stage.plan
	inputs = tuple(
		DecodeInput(node.input_index, node.source_ref, node.kind,
			decode_options(node, lead_in))
		for node, lead_in in zip(stage.nodes, plan.lead_ins)
	)
	emitted = normalize.normalize_all(stage.nodes, target, plan.lead_ins)
	emitted += plan.statements
	output_label = plan.final_label
	if stage.is_final and output_kind == OUTPUT_GIF:
		emitted += palette_statements(output_label)
		output_label = GIF_LABEL
	return StageProgram(stage.stage_id, stage.level, inputs, emitted, output_label,
		plan.total_duration, stage.is_final)

#============================================

def emit_program(stages, target) -> FilterProgram:
	output_kind = target.output_kind
	programs = tuple(emit_stage(stage, target, output_kind) for stage in stages)
	final = stages[-1]
	output_labels = (final.plan.final_label,)
	if output_kind == OUTPUT_GIF:
		output_labels += (GIF_LABEL,)
	return FilterProgram(programs, output_labels, batching.timeline(stages),
		final.plan.total_duration, output_kind)
