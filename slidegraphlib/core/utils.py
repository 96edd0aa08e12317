#!/usr/bin/env python3

import os
import re
import subprocess
import time
from decimal import Decimal
from fractions import Fraction
import rich.console
import rich.markup

#============================================

_QUIET_MODE = {'enabled': os.environ.get('SLIDEGRAPH_QUIET', '') not in ('', '0')}
_CONSOLE = rich.console.Console(stderr=True, highlight=False)

#============================================

def set_quiet_mode(enabled: bool) -> None:
	_QUIET_MODE['enabled'] = bool(enabled)

#============================================

def is_quiet_mode() -> bool:
	return _QUIET_MODE['enabled']

#============================================

def log(message: str) -> None:
	if is_quiet_mode():
		return
	_CONSOLE.print(message, markup=False)

#============================================

def warn(message: str) -> None:
	if is_quiet_mode():
		return
	_CONSOLE.print(f"[yellow]warning:[/yellow] {rich.markup.escape(message)}")

#============================================

def runCmd(cmd: str) -> None:
	showcmd = cmd.strip()
	showcmd = re.sub("  *", " ", showcmd)
	log(f"CMD: '{showcmd}'")
	proc = subprocess.Popen(showcmd, shell=True, stderr=subprocess.PIPE,
		stdout=subprocess.PIPE)
	proc.communicate()
	return

#============================================

def parse_fps(raw_fps) -> Fraction:
	if raw_fps is None:
		raise RuntimeError("profile.fps is required")
	if isinstance(raw_fps, bool):
		raise RuntimeError("profile.fps must be int, float, or fraction string")
	if isinstance(raw_fps, Fraction):
		fps = raw_fps
	elif isinstance(raw_fps, int):
		fps = Fraction(raw_fps, 1)
	elif isinstance(raw_fps, float):
		fps = Fraction(str(raw_fps))
	elif isinstance(raw_fps, str):
		if '/' in raw_fps:
			parts = raw_fps.split('/')
			fps = Fraction(int(parts[0]), int(parts[1]))
		else:
			fps = Fraction(raw_fps)
	else:
		raise RuntimeError("profile.fps must be int, float, or fraction string")
	if fps <= 0:
		raise RuntimeError("profile.fps must be positive")
	return fps

#============================================

def parse_timecode(raw_time) -> Decimal:
	if raw_time is None:
		raise RuntimeError("time value is required")
	if isinstance(raw_time, bool):
		raise RuntimeError("time values must be int, float, or timecode string")
	if isinstance(raw_time, Decimal):
		return raw_time
	if isinstance(raw_time, int):
		return Decimal(raw_time)
	if isinstance(raw_time, float):
		return Decimal(str(raw_time))
	if isinstance(raw_time, str):
		value = raw_time.strip()
		if ':' not in value:
			return Decimal(value)
		parts = value.split(':')
		seconds = Decimal(parts.pop())
		minutes = Decimal(parts.pop())
		hours = Decimal(0)
		if len(parts) > 0:
			hours = Decimal(parts.pop())
		return hours * Decimal(3600) + minutes * Decimal(60) + seconds
	raise RuntimeError("time values must be int, float, or timecode string")

#============================================

def format_number(value) -> str:
	"""
	Render a Decimal, Fraction or int the way ffmpeg filter arguments expect,
	without exponent notation or trailing zeros.
	"""
	if isinstance(value, Fraction):
		if value.denominator == 1:
			return str(value.numerator)
		return f"{value.numerator}/{value.denominator}"
	if isinstance(value, int):
		return str(value)
	number = Decimal(value)
	if number == number.to_integral_value():
		return str(number.quantize(Decimal(1)))
	text = format(number.normalize(), 'f')
	return text

#============================================

def make_timestamp() -> str:
	now = time.localtime()
	datestamp = time.strftime("%y%b%d", now).lower()
	uppercase = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
	hourstamp = uppercase[now[3] % 26]
	minstamp = f"{now[4]:02d}"
	secstamp = uppercase[now[5] % 26]
	return datestamp + hourstamp + minstamp + secstamp

#============================================

def ensure_file_exists(filepath: str) -> None:
	if not os.path.exists(filepath):
		raise RuntimeError(f"file not found: {filepath}")
	return
