#!/usr/bin/env python3

from decimal import Decimal
from slidegraphlib.core import registry
from slidegraphlib.core.statements import FilterOp
from slidegraphlib.core.statements import FilterStatement

#============================================

def normalize_node(node: registry.MediaNode, target,
	lead_in: Decimal = Decimal(0)) -> FilterStatement:
	"""
	Fit one input into the target frame: shrink to fit (never enlarge),
	center on a padded canvas, restart timestamps at zero, and resample
	to the target rate.
	"""
	width = target.width
	height = target.height
	ops = [
		FilterOp('scale', (
			('w', f"'min({width},iw)'"),
			('h', f"'min({height},ih)'"),
			('force_original_aspect_ratio', 'decrease'),
		)),
		FilterOp('pad', (
			(None, width),
			(None, height),
			(None, '(ow-iw)/2'),
			(None, '(oh-ih)/2'),
		)),
		FilterOp('setsar', ((None, 1),)),
		FilterOp('format', ((None, target.pixel_format),)),
	]
	# decoded clips keep their own length; stills are cut by the -t decode option
	if node.kind != registry.KIND_STILL:
		ops.append(FilterOp('trim', (('duration', node.duration),)))
	ops.append(FilterOp('setpts', ((None, 'PTS-STARTPTS'),)))
	if node.kind != registry.KIND_STILL and lead_in > 0:
		ops.append(FilterOp('tpad', (
			('start_mode', 'clone'),
			('start_duration', lead_in),
		)))
	ops.append(FilterOp('fps', ((None, target.fps),)))
	for fragment in node.extra_filters:
		ops.append(FilterOp(fragment, raw=True))
	return FilterStatement((node.input_label(),), tuple(ops), (node.output_label(),))

#============================================

def normalize_all(nodes, target, lead_ins=None) -> tuple:
	if lead_ins is None:
		lead_ins = tuple(Decimal(0) for _ in nodes)
	return tuple(normalize_node(node, target, lead_in)
		for node, lead_in in zip(nodes, lead_ins))
