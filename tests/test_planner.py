"""
Pytest coverage for the composition planner.
"""

# Standard Library
import os
import sys
from decimal import Decimal

# PIP3 modules
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from slidegraphlib.core import planner
from slidegraphlib.core import registry
from slidegraphlib.core.errors import EmptyGraphError
from slidegraphlib.core.errors import GraphIntegrityError

#============================================

def _stills(durations: list) -> tuple:
	"""
	Register one still per duration.
	"""
	return registry.register_all(
		[{"source": f"img{index}.png", "duration": value}
			for index, value in enumerate(durations)]
	)

#============================================

def _plan(durations: list, edges: list, cut_join: str = "concat"):
	"""
	Resolve edges and plan the composition for still nodes.
	"""
	nodes = _stills(durations)
	resolved = planner.resolve_transitions(nodes, edges)
	return planner.plan_composition(nodes, resolved, cut_join=cut_join)

#============================================

def test_single_node_has_no_composition() -> None:
	"""
	Ensure a lone node passes its normalized label straight through.
	"""
	plan = _plan([3], [])
	assert plan.final_label == "v0"
	assert plan.statements == ()
	assert plan.total_duration == Decimal("3")

#============================================

def test_empty_graph_is_rejected() -> None:
	"""
	Ensure zero nodes is an error, not an empty plan.
	"""
	with pytest.raises(EmptyGraphError):
		planner.plan_composition((), ())

#============================================

def test_all_cuts_use_one_concat() -> None:
	"""
	Ensure a plain slideshow becomes a single N-input concat.
	"""
	plan = _plan([1, 2, 3, 4], [
		{"after": 0, "effect": "cut"},
		{"after": 2, "effect": "none", "duration": 1},
	])
	assert len(plan.statements) == 1
	concat = plan.statements[0]
	assert concat.render() == "[v0][v1][v2][v3]concat=n=4:v=1:a=0[outv]"
	assert all(item.operation != "xfade" for item in plan.statements)
	assert plan.total_duration == Decimal("10")
	assert [event.offset for event in plan.events] == [Decimal(1), Decimal(3), Decimal(6)]

#============================================

def test_fade_then_cut_scenario() -> None:
	"""
	Ensure the three-still fade/cut example compiles as expected.
	"""
	plan = _plan([2, 2, 2], [
		{"after": 0, "effect": "fade", "duration": 0.5},
		{"after": 1, "effect": "none"},
	])
	rendered = [item.render() for item in plan.statements]
	assert rendered == [
		"[v0][v1]xfade=transition=fade:duration=0.5:offset=1.5[t0]",
		"[t0][v2]concat=n=2:v=1:a=0[outv]",
	]
	xfade = plan.events[0]
	assert xfade.offset == Decimal("1.5")
	assert xfade.duration == Decimal("0.5")
	assert plan.total_duration == Decimal("6")
	assert plan.lead_ins == (Decimal(0), Decimal("0.5"), Decimal(0))

#============================================

def test_cut_join_xfade_uses_minimal_fade() -> None:
	"""
	Ensure the xfade cut join chains an imperceptible fade instead of concat.
	"""
	plan = _plan([2, 2, 2], [{"after": 0, "effect": "fade", "duration": 0.5}],
		cut_join="xfade")
	assert plan.statements[1].render() == (
		"[t0][v2]xfade=transition=fade:duration=0.001:offset=3.999[outv]"
	)
	assert plan.total_duration == Decimal("6")

#============================================

def test_duration_conservation_and_offset_bounds() -> None:
	"""
	Ensure transitions overlap instead of adding time, and offsets stay in range.
	"""
	durations = [Decimal("1.5"), Decimal("3"), Decimal("0.4"), Decimal("2"),
		Decimal("2.25")]
	edges = [
		{"after": 0, "effect": "slideleft", "duration": 1},
		{"after": 1, "effect": "fade", "duration": 2},
		{"after": 2, "effect": "circleopen", "duration": 0.3},
		{"after": 3, "effect": "cut"},
	]
	nodes = _stills(durations)
	resolved = planner.resolve_transitions(nodes, edges)
	plan = planner.plan_composition(nodes, resolved)
	assert plan.total_duration == sum(durations)
	cumulative = durations[0]
	previous_offset = Decimal(-1)
	for index, event in enumerate(plan.events):
		assert Decimal(0) <= event.offset <= cumulative
		assert event.duration <= min(durations[index], durations[index + 1])
		assert event.offset >= previous_offset
		previous_offset = event.offset
		cumulative += durations[index + 1]
	# capped by the 0.4 second neighbour
	assert plan.events[1].duration == Decimal("0.4")
	assert plan.events[2].duration == Decimal("0.3")

#============================================

def test_plans_are_repeatable() -> None:
	"""
	Ensure compiling the same input twice gives identical statements.
	"""
	edges = [{"after": 0, "effect": "zoom", "duration": 0.7}]
	first = _plan([2, 3, 1], edges)
	second = _plan([2, 3, 1], edges)
	assert first == second
	assert [item.render() for item in first.statements] == \
		[item.render() for item in second.statements]

#============================================

@pytest.mark.parametrize("edge", [
	{"after": 3, "effect": "fade"},
	{"after": -1, "effect": "fade"},
	{"after": "1", "effect": "fade"},
	{"effect": "fade"},
])
def test_out_of_range_edges(edge: dict) -> None:
	"""
	Ensure edges outside the node path are rejected.
	"""
	nodes = _stills([1, 1, 1])
	with pytest.raises(GraphIntegrityError):
		planner.resolve_transitions(nodes, [edge])

#============================================

def test_single_node_with_edge_names_missing_transitions() -> None:
	"""
	Ensure an edge on a one-node graph reports that no pair exists.
	"""
	nodes = _stills([2])
	with pytest.raises(GraphIntegrityError) as error:
		planner.resolve_transitions(nodes, [{"after": 0, "effect": "fade"}])
	assert error.value.reason == "graph has no transitions"
	assert error.value.position == 0
	assert "-1" not in str(error.value)

#============================================

def test_duplicate_edges_are_rejected() -> None:
	"""
	Ensure two edges for the same pair are an integrity error.
	"""
	nodes = _stills([1, 1])
	with pytest.raises(GraphIntegrityError) as error:
		planner.resolve_transitions(nodes, [
			{"after": 0, "effect": "fade"},
			{"after": 0, "effect": "wipeleft"},
		])
	assert error.value.position == 1

#============================================

def test_zero_length_neighbour_joins_with_concat() -> None:
	"""
	Ensure a transition capped to zero does not emit a degenerate xfade.
	"""
	plan = _plan([2, 0, 2], [
		{"after": 0, "effect": "fade", "duration": 0.5},
		{"after": 1, "effect": "fade", "duration": 0.5},
	])
	assert len(plan.statements) == 1
	assert plan.statements[0].operation == "concat"
	assert plan.total_duration == Decimal("4")
