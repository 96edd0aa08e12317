#!/usr/bin/env python3

"""
Split oversized graphs into windows that ffmpeg can decode at once.

Each window becomes its own stage with its own dense input indices. A
window's rendered output is fed to the next level as a synthetic node,
and the transitions at window boundaries become that level's edges, so
the absolute timeline is the same whatever the batch ceiling.
"""

from decimal import Decimal
from typing import NamedTuple
from slidegraphlib.core import planner
from slidegraphlib.core import registry

#============================================

DEFAULT_MAX_BATCH_INPUTS = 15
MAIN_STAGE_ID = 'main'
WINDOW_LABEL = 'outw'

#============================================

class StagePlan(NamedTuple):
	stage_id: str
	level: int
	nodes: tuple
	plan: planner.CompositionPlan
	time_base: Decimal
	is_final: bool

	#============================
	def absolute_events(self) -> tuple:
		return tuple(event._replace(offset=event.offset + self.time_base)
			for event in self.plan.events)

#============================================

def split_windows(count: int, max_batch_inputs: int) -> tuple:
	"""
	Consecutive (start, stop) windows of at most max_batch_inputs nodes.
	"""
	if max_batch_inputs < 2:
		raise RuntimeError("max_batch_inputs must be at least 2")
	windows = []
	for start in range(0, count, max_batch_inputs):
		windows.append((start, min(start + max_batch_inputs, count)))
	return tuple(windows)

#============================================

def reindex(nodes) -> tuple:
	return tuple(node._replace(input_index=index) for index, node in enumerate(nodes))

#============================================

def plan_stages(nodes, resolved, max_batch_inputs: int = DEFAULT_MAX_BATCH_INPUTS,
	cut_join: str = planner.JOIN_CONCAT) -> tuple:
	"""
	Plan every stage needed to render nodes, innermost windows first.

	Args:
		nodes: registered MediaNode sequence.
		resolved: ResolvedTransition per adjacent pair.
		max_batch_inputs: ceiling on decode inputs per stage.
		cut_join: how cut pairs are joined inside a cross-fade chain.

	Returns:
		tuple of StagePlan in execution order; the last one is final.
	"""
	if max_batch_inputs < 2:
		raise RuntimeError("max_batch_inputs must be at least 2")
	# decided once for the whole graph so every window joins cuts the same way
	chain = planner.has_real_transition(resolved)
	stages = []
	level = 0
	nodes = tuple(nodes)
	resolved = tuple(resolved)
	while len(nodes) > max_batch_inputs:
		next_nodes = []
		next_resolved = []
		time_base = Decimal(0)
		for number, (start, stop) in enumerate(split_windows(len(nodes), max_batch_inputs)):
			stage_id = f"{level}-{number}"
			window_nodes = reindex(nodes[start:stop])
			plan = planner.plan_composition(window_nodes, resolved[start:stop - 1],
				final_label=WINDOW_LABEL, cut_join=cut_join, chain=chain)
			stages.append(StagePlan(stage_id, level, window_nodes, plan, time_base,
				False))
			next_nodes.append(registry.MediaNode(
				input_index=number,
				source_ref=registry.StageRef(stage_id),
				duration=plan.total_duration,
				kind=registry.KIND_STAGE,
			))
			if stop < len(nodes):
				next_resolved.append(resolved[stop - 1])
			time_base += plan.total_duration
		nodes = tuple(next_nodes)
		resolved = tuple(next_resolved)
		level += 1
	plan = planner.plan_composition(nodes, resolved, final_label=planner.FINAL_LABEL,
		cut_join=cut_join, chain=chain)
	stages.append(StagePlan(MAIN_STAGE_ID, level, nodes, plan, Decimal(0), True))
	return tuple(stages)

#============================================

def timeline(stages) -> tuple:
	"""
	Absolute transition events across all stages, in pair order.
	"""
	events = []
	for stage in stages:
		events.extend(stage.absolute_events())
	return tuple(sorted(events, key=lambda event: event.after_index))
