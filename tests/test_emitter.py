#!/usr/bin/env python3

"""
Pytest coverage for normalization and program emission.
"""

# Standard Library
import os
import sys
from decimal import Decimal
from fractions import Fraction

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from slidegraphlib.core import compiler
from slidegraphlib.core import normalize
from slidegraphlib.core import registry

#============================================

TARGET = compiler.make_target(1280, 720, fps=30)

#============================================

def test_still_normalization_chain() -> None:
	"""
	Ensure stills are fitted, padded, retimed and resampled in order.
	"""
	node = registry.register_all([{"source": "a.png", "duration": 2}])[0]
	rendered = normalize.normalize_node(node, TARGET).render()
	assert rendered == (
		"[0:v]scale=w='min(1280,iw)':h='min(720,ih)':force_original_aspect_ratio=decrease,"
		"pad=1280:720:(ow-iw)/2:(oh-ih)/2,setsar=1,format=yuv420p,"
		"setpts=PTS-STARTPTS,fps=30[v0]"
	)

#============================================

def test_clip_normalization_trims_and_pads() -> None:
	"""
	Ensure clips are trimmed to their duration and padded for lead-in.
	"""
	nodes = registry.register_all([
		{"source": "a.png", "duration": 1},
		{"source": "b.mp4", "duration": "3.5", "kind": "clip", "filters": ["hflip"]},
	])
	target = compiler.make_target(640, 480, fps="30000/1001")
	rendered = normalize.normalize_node(nodes[1], target, Decimal("0.5")).render()
	assert rendered.startswith("[1:v]scale=w='min(640,iw)'")
	assert ",trim=duration=3.5,setpts=PTS-STARTPTS," in rendered
	assert ",tpad=start_mode=clone:start_duration=0.5,fps=30000/1001,hflip[v1]" in rendered

#============================================

def test_decode_options_follow_lead_in() -> None:
	"""
	Ensure stills loop for their own time plus any incoming fade, clips get none.
	"""
	nodes = [
		{"source": "a.png", "duration": 2},
		{"source": "b.png", "duration": 2},
		{"source": "c.mp4", "duration": 2, "kind": "clip"},
	]
	edges = [
		{"after": 0, "effect": "fade", "duration": 0.5},
		{"after": 1, "effect": "slideup", "duration": 0.25},
	]
	program = compiler.compile_graph(nodes, edges, TARGET)
	inputs = program.final_stage.inputs
	assert inputs[0].options == (("loop", 1), ("t", Decimal("2")))
	assert inputs[1].options == (("loop", 1), ("t", Decimal("2.5")))
	assert inputs[2].options == ()
	assert [item.source_ref for item in inputs] == ["a.png", "b.png", "c.mp4"]
	assert program.output_labels == ("outv",)
	assert program.map_label == "outv"

#============================================

def test_single_node_program() -> None:
	"""
	Ensure a single still maps its normalized label with no composition.
	"""
	program = compiler.compile_graph([{"source": "a.png", "duration": 4}], [], TARGET)
	stage = program.final_stage
	assert len(stage.statements) == 1
	assert stage.output_label == "v0"
	assert program.output_labels == ("v0",)
	assert program.timeline == ()
	assert program.total_duration == Decimal("4")

#============================================

def test_gif_output_appends_palette_stages() -> None:
	"""
	Ensure animated-image output ends with split, palettegen and paletteuse.
	"""
	target = compiler.make_target(720, 720, fps=12, output_kind="gif")
	program = compiler.compile_graph(
		[{"source": "a.png", "duration": 1}, {"source": "b.png", "duration": 1}],
		[{"after": 0, "effect": "dissolve", "duration": 0.4}],
		target)
	rendered = [item.render() for item in program.final_stage.statements[-3:]]
	assert rendered == [
		"[outv]split[s0][s1]",
		"[s0]palettegen=max_colors=256[p]",
		"[s1][p]paletteuse=dither=bayer:bayer_scale=5[outgif]",
	]
	assert program.output_labels == ("outv", "outgif")
	assert program.final_stage.output_label == "outgif"
	# palette stages do not touch the computed timeline
	assert program.timeline[0].offset == Decimal("0.6")
	assert program.total_duration == Decimal("2")

#============================================

def test_program_dict_is_plain_data() -> None:
	"""
	Ensure the external contract serializes to plain values.
	"""
	program = compiler.compile_graph(
		[{"source": "a.png", "duration": 1.5}, {"source": "b.png", "duration": 2}],
		[{"after": 0, "effect": "slide", "duration": 0.5}],
		TARGET)
	data = program.to_dict()
	assert data["total_duration"] == "3.5"
	assert data["timeline"][0] == {
		"after": 0,
		"effect": "slide",
		"join": "xfade",
		"engine_effect": "slideleft",
		"duration": "0.5",
		"offset": "1",
	}
	stage = data["stages"][0]
	assert stage["inputs"][1]["options"] == {"loop": "1", "t": "2.5"}
	assert stage["statements"][-1] == "[v0][v1]xfade=transition=slideleft:duration=0.5:offset=1[outv]"
	assert TARGET.fps == Fraction(30)

#============================================

def test_unknown_effect_compiles_as_fade() -> None:
	"""
	Ensure an unrecognized transition name still produces a fade.
	"""
	program = compiler.compile_graph(
		[{"source": "a.png", "duration": 2}, {"source": "b.png", "duration": 2}],
		[{"after": 0, "effect": "sparkle", "duration": 0.5}],
		TARGET)
	event = program.timeline[0]
	assert event.effect == "sparkle"
	assert event.engine_effect == "fade"
	assert event.join == "xfade"
