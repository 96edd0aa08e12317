#!/usr/bin/env python3

from typing import NamedTuple
from fractions import Fraction
from slidegraphlib.core import batching
from slidegraphlib.core import emitter
from slidegraphlib.core import planner
from slidegraphlib.core import registry
from slidegraphlib.core import utils
from slidegraphlib.core.errors import EmptyGraphError

#============================================

OUTPUT_KINDS = (emitter.OUTPUT_VIDEO, emitter.OUTPUT_GIF)

#============================================

class Target(NamedTuple):
	width: int
	height: int
	fps: Fraction
	output_kind: str = emitter.OUTPUT_VIDEO
	max_batch_inputs: int = batching.DEFAULT_MAX_BATCH_INPUTS
	pixel_format: str = 'yuv420p'
	cut_join: str = planner.JOIN_CONCAT

#============================================

def make_target(width, height, fps=30, output_kind: str = emitter.OUTPUT_VIDEO,
	max_batch_inputs: int = batching.DEFAULT_MAX_BATCH_INPUTS,
	pixel_format: str = 'yuv420p', cut_join: str = planner.JOIN_CONCAT) -> Target:
	width = int(width)
	height = int(height)
	if width <= 0 or height <= 0:
		raise RuntimeError("target width and height must be positive")
	if output_kind not in OUTPUT_KINDS:
		raise RuntimeError(f"output kind must be one of {', '.join(OUTPUT_KINDS)}")
	max_batch_inputs = int(max_batch_inputs)
	if max_batch_inputs < 2:
		raise RuntimeError("max_batch_inputs must be at least 2")
	if cut_join not in planner.CUT_JOINS:
		raise RuntimeError(f"cut_join must be one of {', '.join(planner.CUT_JOINS)}")
	return Target(width, height, utils.parse_fps(fps), output_kind,
		max_batch_inputs, pixel_format, cut_join)

#============================================

def compile_graph(nodes, edges, target: Target) -> emitter.FilterProgram:
	"""
	Compile media nodes and sparse transition edges into a filter program.

	Args:
		nodes: node descriptors ({source, duration, kind, filters}) or
			MediaNode values, in timeline order.
		edges: edge descriptors ({after, effect, duration}); may be empty.
		target: Target geometry, rate, output kind and batch ceiling.

	Returns:
		FilterProgram with one stage per batch window plus the final stage.
	"""
	registered = registry.register_all(nodes)
	if len(registered) == 0:
		raise EmptyGraphError("no nodes to compile")
	resolved = planner.resolve_transitions(registered, edges)
	for item in resolved:
		if item.fallback:
			utils.warn(f"unknown transition '{item.effect}' after node "
				f"{item.after_index}, using {item.engine_effect}")
	stages = batching.plan_stages(registered, resolved, target.max_batch_inputs,
		target.cut_join)
	return emitter.emit_program(stages, target)
