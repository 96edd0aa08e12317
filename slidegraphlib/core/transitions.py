#!/usr/bin/env python3

"""
Transition identifier lookup and duration limits for the xfade filter.
"""

import types
from decimal import Decimal
from typing import NamedTuple
from slidegraphlib.core import utils

#============================================

DEFAULT_EFFECT = 'fade'
DEFAULT_DURATION = Decimal('0.5')
MIN_DURATION = Decimal('0.1')
CUT_DURATION = Decimal('0.001')

CUT_EFFECTS = frozenset(('none', 'cut'))

_XFADE_EFFECTS = (
	'fade', 'fadeblack', 'fadewhite', 'dissolve',
	'slideleft', 'slideright', 'slideup', 'slidedown',
	'wipeleft', 'wiperight', 'wipeup', 'wipedown',
	'wipetl', 'wipetr', 'wipebl', 'wipebr',
	'smoothleft', 'smoothright', 'smoothup', 'smoothdown',
	'circlecrop', 'rectcrop', 'circleopen', 'circleclose',
	'horzopen', 'horzclose', 'vertopen', 'vertclose',
	'diagbl', 'diagbr', 'diagtl', 'diagtr',
	'radial', 'pixelize', 'distance', 'squeezev', 'squeezeh', 'zoomin',
	'coverleft', 'coverright', 'coverup', 'coverdown',
	'revealleft', 'revealright', 'revealup', 'revealdown',
	'hlwind', 'hrwind', 'vuwind', 'vdwind',
	'hlslice', 'hrslice', 'vuslice', 'vdslice',
	'fadegrays', 'hblur',
)

_ALIASES = {
	'slide': 'slideleft',
	'zoom': 'zoomin',
}

def _build_table() -> types.MappingProxyType:
	table = {name: name for name in _XFADE_EFFECTS}
	table.update(_ALIASES)
	return types.MappingProxyType(table)

TRANSITION_TABLE = _build_table()

#============================================

class Resolution(NamedTuple):
	engine_effect: str
	duration: Decimal
	is_cut: bool = False
	fallback: bool = False

#============================================

def normalize_effect(effect) -> str:
	if effect is None:
		return 'none'
	name = str(effect).strip().lower()
	if name == '':
		return 'none'
	return name

#============================================

def is_cut(effect) -> bool:
	return normalize_effect(effect) in CUT_EFFECTS

#============================================

def known_effects() -> tuple:
	return tuple(sorted(TRANSITION_TABLE.keys()))

#============================================

def resolve(effect, requested_duration=None) -> Resolution:
	"""
	Map a requested transition onto an xfade effect and a usable duration.

	Cuts become an imperceptible fade so that every adjacent pair can still
	be joined by one composition primitive. Unknown identifiers fall back
	to a plain fade instead of failing.

	Args:
		effect: transition identifier, alias, or a cut sentinel.
		requested_duration: seconds; None selects the default duration.

	Returns:
		Resolution with the engine effect and the floored duration.
	"""
	name = normalize_effect(effect)
	if name in CUT_EFFECTS:
		return Resolution(DEFAULT_EFFECT, CUT_DURATION, is_cut=True)
	engine_effect = TRANSITION_TABLE.get(name)
	fallback = False
	if engine_effect is None:
		engine_effect = DEFAULT_EFFECT
		fallback = True
	if requested_duration is None:
		duration = DEFAULT_DURATION
	else:
		duration = utils.parse_timecode(requested_duration)
	if not duration.is_finite() or duration < MIN_DURATION:
		duration = MIN_DURATION
	return Resolution(engine_effect, duration, fallback=fallback)

#============================================

def cap(resolution: Resolution, left_duration: Decimal,
	right_duration: Decimal) -> Resolution:
	"""
	Limit a transition to the shorter of its two neighbours.
	"""
	limit = min(left_duration, right_duration)
	if resolution.duration <= limit:
		return resolution
	return resolution._replace(duration=limit)
