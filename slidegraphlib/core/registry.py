#!/usr/bin/env python3

import decimal
from decimal import Decimal
from typing import NamedTuple
from slidegraphlib.core import utils
from slidegraphlib.core.errors import InvalidDescriptor

#============================================

KIND_STILL = 'still'
KIND_CLIP = 'clip'
KIND_STAGE = 'stage'

KIND_ALIASES = {
	'still': KIND_STILL,
	'still-image': KIND_STILL,
	'image': KIND_STILL,
	'clip': KIND_CLIP,
	'motion-clip': KIND_CLIP,
	'video': KIND_CLIP,
	'stage': KIND_STAGE,
}

#============================================

class StageRef(NamedTuple):
	"""
	Source handle for a batch window's rendered output.
	"""
	stage_id: str

	def __str__(self) -> str:
		return f"stage:{self.stage_id}"

#============================================

class MediaNode(NamedTuple):
	input_index: int
	source_ref: object
	duration: Decimal
	kind: str
	extra_filters: tuple = ()

	#============================
	def input_label(self) -> str:
		return f"{self.input_index}:v"

	#============================
	def output_label(self) -> str:
		return f"v{self.input_index}"

#============================================

def normalize_kind(raw_kind, index: int) -> str:
	if raw_kind is None:
		return KIND_STILL
	kind = KIND_ALIASES.get(str(raw_kind).strip().lower())
	if kind is None:
		raise InvalidDescriptor(index, f"unrecognized kind: {raw_kind}")
	return kind

#============================================

def parse_duration(raw_duration, index: int) -> Decimal:
	if raw_duration is None:
		raise InvalidDescriptor(index, "duration is required")
	try:
		duration = utils.parse_timecode(raw_duration)
	except (RuntimeError, ValueError, decimal.InvalidOperation) as error:
		raise InvalidDescriptor(index, f"invalid duration {raw_duration!r}") from error
	if not duration.is_finite():
		raise InvalidDescriptor(index, f"invalid duration {raw_duration!r}")
	if duration < 0:
		raise InvalidDescriptor(index, f"negative duration {raw_duration!r}")
	return duration

#============================================

class NodeRegistry():
	"""
	Ordered media nodes for one compilation; indices are dense and follow
	registration order.
	"""
	def __init__(self):
		self._nodes = []

	#============================
	def register(self, descriptor) -> MediaNode:
		index = len(self._nodes)
		if isinstance(descriptor, MediaNode):
			descriptor = descriptor._asdict()
		if not isinstance(descriptor, dict):
			raise InvalidDescriptor(index, "descriptor must be a mapping")
		source_ref = descriptor.get('source', descriptor.get('source_ref'))
		if source_ref is None or source_ref == '':
			raise InvalidDescriptor(index, "source is required")
		kind = normalize_kind(descriptor.get('kind'), index)
		duration = parse_duration(descriptor.get('duration'), index)
		raw_filters = descriptor.get('filters', descriptor.get('extra_filters'))
		if raw_filters is None:
			raw_filters = ()
		if isinstance(raw_filters, str) or not isinstance(raw_filters, (list, tuple)):
			raise InvalidDescriptor(index, "filters must be a list of strings")
		for fragment in raw_filters:
			if not isinstance(fragment, str) or fragment.strip() == '':
				raise InvalidDescriptor(index, "filters must be a list of strings")
		node = MediaNode(
			input_index=index,
			source_ref=source_ref,
			duration=duration,
			kind=kind,
			extra_filters=tuple(fragment.strip() for fragment in raw_filters),
		)
		self._nodes.append(node)
		return node

	#============================
	def all(self) -> tuple:
		return tuple(self._nodes)

	#============================
	def __len__(self) -> int:
		return len(self._nodes)

#============================================

def register_all(descriptors) -> tuple:
	registry = NodeRegistry()
	for descriptor in descriptors:
		registry.register(descriptor)
	return registry.all()
