#!/usr/bin/env python3

from fractions import Fraction
from slidegraphlib.core import emitter
from slidegraphlib.core import utils

#============================================

QUALITY_PRESETS = {
	'web': {'crf': 28, 'preset': 'fast', 'bitrate': '1M'},
	'standard': {'crf': 23, 'preset': 'medium', 'bitrate': '2M'},
	'high': {'crf': 18, 'preset': 'slow', 'bitrate': '4M'},
	'ultra': {'crf': 15, 'preset': 'veryslow', 'bitrate': '8M'},
}
DEFAULT_QUALITY = 'standard'

OUTPUT_FORMATS = ('mp4', 'mov', 'mkv', 'webm', 'gif')

#============================================

def get_quality(quality: str) -> dict:
	if quality is None:
		quality = DEFAULT_QUALITY
	settings = QUALITY_PRESETS.get(str(quality).lower())
	if settings is None:
		raise RuntimeError(f"quality must be one of {', '.join(QUALITY_PRESETS)}")
	return settings

#============================================

def format_from_path(output_file: str) -> str:
	extension = output_file.rsplit('.', 1)[-1].lower() if '.' in output_file else ''
	if extension not in OUTPUT_FORMATS:
		raise RuntimeError(f"cannot infer output format from {output_file}")
	return extension

#============================================

def output_kind(output_format: str) -> str:
	if output_format not in OUTPUT_FORMATS:
		raise RuntimeError(f"output.format must be one of {', '.join(OUTPUT_FORMATS)}")
	if output_format == 'gif':
		return emitter.OUTPUT_GIF
	return emitter.OUTPUT_VIDEO

#============================================

def output_args(output_format: str, quality: str, fps: Fraction,
	pixel_format: str = 'yuv420p') -> str:
	settings = get_quality(quality)
	rate = utils.format_number(fps)
	if output_format == 'gif':
		return f" -r {rate} -loop 0 "
	if output_format == 'webm':
		cmd = " -codec:v libvpx-vp9 "
		cmd += f" -crf {settings['crf']} -b:v {settings['bitrate']} "
		cmd += f" -pix_fmt {pixel_format} -r {rate} "
		return cmd
	cmd = " -codec:v libx264 "
	cmd += f" -preset {settings['preset']} -crf {settings['crf']} "
	cmd += f" -b:v {settings['bitrate']} -pix_fmt {pixel_format} -r {rate} "
	if output_format in ('mp4', 'mov'):
		cmd += " -movflags +faststart "
	return cmd

#============================================

def intermediate_args(fps: Fraction, pixel_format: str = 'yuv420p') -> str:
	rate = utils.format_number(fps)
	cmd = " -codec:v libx264 -crf 0 -preset ultrafast "
	cmd += f" -pix_fmt {pixel_format} -r {rate} "
	return cmd
