#!/usr/bin/env python3

import decimal
from decimal import Decimal
from typing import NamedTuple
from slidegraphlib.core import statements
from slidegraphlib.core import transitions
from slidegraphlib.core.errors import EmptyGraphError
from slidegraphlib.core.errors import GraphIntegrityError

#============================================

FINAL_LABEL = 'outv'
JOIN_XFADE = 'xfade'
JOIN_CONCAT = 'concat'
CUT_JOINS = (JOIN_CONCAT, JOIN_XFADE)

#============================================

class TransitionEdge(NamedTuple):
	after_index: int
	effect: str = transitions.DEFAULT_EFFECT
	requested_duration: object = None

#============================================

class ResolvedTransition(NamedTuple):
	after_index: int
	effect: str
	engine_effect: str
	duration: Decimal
	is_cut: bool
	fallback: bool = False

	#============================
	@property
	def is_real(self) -> bool:
		return not self.is_cut and self.duration > 0

#============================================

class TransitionEvent(NamedTuple):
	"""
	How one adjacent pair was joined and where on the timeline.
	"""
	after_index: int
	effect: str
	engine_effect: str
	join: str
	duration: Decimal
	offset: Decimal

#============================================

class CompositionPlan(NamedTuple):
	statements: tuple
	final_label: str
	events: tuple
	total_duration: Decimal
	lead_ins: tuple

#============================================

def parse_edge(descriptor, position: int) -> TransitionEdge:
	if isinstance(descriptor, TransitionEdge):
		return descriptor
	if not isinstance(descriptor, dict):
		raise GraphIntegrityError(position, "edge must be a mapping")
	after_index = descriptor.get('after', descriptor.get('after_index'))
	if isinstance(after_index, bool) or not isinstance(after_index, int):
		raise GraphIntegrityError(position, f"after must be an integer, got {after_index!r}")
	effect = descriptor.get('effect', descriptor.get('type', transitions.DEFAULT_EFFECT))
	duration = descriptor.get('duration', descriptor.get('requested_duration'))
	return TransitionEdge(after_index, effect, duration)

#============================================

def resolve_transitions(nodes, edges) -> tuple:
	"""
	Resolve a sparse edge list into one transition per adjacent node pair.

	Missing pairs are cuts. Every duration is capped to the shorter of the
	two real neighbours, so later batching never changes it.

	Args:
		nodes: registered MediaNode sequence.
		edges: edge descriptors or TransitionEdge values, in any order.

	Returns:
		tuple of ResolvedTransition, length len(nodes) - 1.
	"""
	pair_count = max(len(nodes) - 1, 0)
	by_pair = {}
	for position, descriptor in enumerate(edges or ()):
		edge = parse_edge(descriptor, position)
		if pair_count == 0:
			raise GraphIntegrityError(position, "graph has no transitions")
		if edge.after_index < 0 or edge.after_index >= pair_count:
			raise GraphIntegrityError(position,
				f"after index {edge.after_index} outside 0..{pair_count - 1}")
		if edge.after_index in by_pair:
			raise GraphIntegrityError(position,
				f"duplicate transition after node {edge.after_index}")
		by_pair[edge.after_index] = (position, edge)
	resolved = []
	for index in range(pair_count):
		effect = 'none'
		requested = None
		position = None
		if index in by_pair:
			(position, edge) = by_pair[index]
			effect = edge.effect
			requested = edge.requested_duration
		try:
			resolution = transitions.resolve(effect, requested)
		except (RuntimeError, ValueError, decimal.InvalidOperation) as error:
			raise GraphIntegrityError(position,
				f"invalid duration {requested!r}") from error
		resolution = transitions.cap(resolution, nodes[index].duration,
			nodes[index + 1].duration)
		resolved.append(ResolvedTransition(
			after_index=index,
			effect=transitions.normalize_effect(effect),
			engine_effect=resolution.engine_effect,
			duration=resolution.duration,
			is_cut=resolution.is_cut,
			fallback=resolution.fallback,
		))
	return tuple(resolved)

#============================================

def has_real_transition(resolved) -> bool:
	return any(item.is_real for item in resolved)

#============================================

def _join_kind(item: ResolvedTransition, chain: bool, cut_join: str) -> str:
	if item.is_real:
		return JOIN_XFADE
	if item.is_cut and chain and cut_join == JOIN_XFADE and item.duration > 0:
		return JOIN_XFADE
	return JOIN_CONCAT

#============================================

def plan_composition(nodes, resolved, final_label: str = FINAL_LABEL,
	cut_join: str = JOIN_CONCAT, chain: bool = None,
	label_prefix: str = 't') -> CompositionPlan:
	"""
	Join normalized node labels into one stream.

	With no cross-fade needed the nodes go through one N-input concat.
	Otherwise pairs are chained left to right: each xfade starts at
	cumulative - duration, and the incoming node receives that duration
	as lead-in so the chained stream always measures the running total.

	Args:
		nodes: MediaNode sequence, dense local indices.
		resolved: ResolvedTransition per adjacent pair, in order.
		final_label: label written by the last statement.
		cut_join: 'concat' joins cut pairs with concat, 'xfade' with a
			minimal fade.
		chain: force (True) or forbid (False) the pairwise chain; None
			decides from this window's own transitions.
		label_prefix: prefix for intermediate labels.

	Returns:
		CompositionPlan.
	"""
	if len(nodes) == 0:
		raise EmptyGraphError()
	if len(resolved) != len(nodes) - 1:
		raise GraphIntegrityError(len(resolved),
			f"expected {len(nodes) - 1} transitions, got {len(resolved)}")
	if cut_join not in CUT_JOINS:
		raise RuntimeError(f"cut_join must be one of {', '.join(CUT_JOINS)}")
	labels = [node.output_label() for node in nodes]
	if len(nodes) == 1:
		return CompositionPlan((), labels[0], (), nodes[0].duration, (Decimal(0),))
	if chain is None:
		chain = has_real_transition(resolved)
	joins = [_join_kind(item, chain, cut_join) for item in resolved]
	if all(join == JOIN_CONCAT for join in joins):
		return _plan_concat(nodes, resolved, labels, final_label)
	return _plan_chain(nodes, resolved, joins, labels, final_label, label_prefix)

#============================================

def _plan_concat(nodes, resolved, labels: list, final_label: str) -> CompositionPlan:
	events = []
	cumulative = nodes[0].duration
	for index, item in enumerate(resolved):
		events.append(TransitionEvent(item.after_index, item.effect,
			JOIN_CONCAT, JOIN_CONCAT, Decimal(0), cumulative))
		cumulative += nodes[index + 1].duration
	concat = statements.statement(labels, 'concat',
		(('n', len(nodes)), ('v', 1), ('a', 0)), (final_label,))
	lead_ins = tuple(Decimal(0) for _ in nodes)
	return CompositionPlan((concat,), final_label, tuple(events), cumulative, lead_ins)

#============================================

def _plan_chain(nodes, resolved, joins: list, labels: list, final_label: str,
	label_prefix: str) -> CompositionPlan:
	emitted = []
	events = []
	lead_ins = [Decimal(0)]
	cumulative = nodes[0].duration
	previous = labels[0]
	last = len(resolved) - 1
	for index, item in enumerate(resolved):
		out_label = final_label if index == last else f"{label_prefix}{index}"
		next_label = labels[index + 1]
		if joins[index] == JOIN_XFADE:
			duration = item.duration
			offset = max(cumulative - duration, Decimal(0))
			emitted.append(statements.statement((previous, next_label), 'xfade',
				(('transition', item.engine_effect), ('duration', duration),
				('offset', offset)), (out_label,)))
			events.append(TransitionEvent(item.after_index, item.effect,
				item.engine_effect, JOIN_XFADE, duration, offset))
		else:
			duration = Decimal(0)
			offset = cumulative
			emitted.append(statements.statement((previous, next_label), 'concat',
				(('n', 2), ('v', 1), ('a', 0)), (out_label,)))
			events.append(TransitionEvent(item.after_index, item.effect,
				JOIN_CONCAT, JOIN_CONCAT, duration, offset))
		lead_ins.append(duration)
		cumulative += nodes[index + 1].duration
		previous = out_label
	return CompositionPlan(tuple(emitted), final_label, tuple(events), cumulative,
		tuple(lead_ins))
