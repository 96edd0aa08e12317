#!/usr/bin/env python3

import os
import shlex
import shutil
import tempfile
import time
from tqdm import tqdm
from slidegraphlib.core import emitter
from slidegraphlib.core import encoding
from slidegraphlib.core import registry
from slidegraphlib.core import utils

#============================================

_RUN_COUNTER = {'value': 0}

#============================================

def make_run_tag() -> str:
	"""
	Tag that keeps stage files of separate renders apart in a shared cache dir.
	"""
	_RUN_COUNTER['value'] += 1
	return f"{utils.make_timestamp()}-{os.getpid()}-{_RUN_COUNTER['value']:04d}"

#============================================

def stage_file_name(stage_id: str, run_tag: str) -> str:
	return f"{run_tag}-stage-{stage_id}.mkv"

#============================================

def build_stage_command(stage: emitter.StageProgram, output_file: str,
	stage_files: dict, encode_args: str) -> str:
	"""
	Assemble the ffmpeg command that renders one stage.

	Args:
		stage: compiled stage program.
		output_file: file the stage writes.
		stage_files: stage_id -> file already rendered by earlier stages.
		encode_args: codec arguments for this stage's output.

	Returns:
		shell command string.
	"""
	cmd = "ffmpeg -y -hide_banner "
	for item in stage.inputs:
		for key, value in item.options:
			cmd += f" -{key} {utils.format_number(value)} "
		source = item.source_ref
		if isinstance(source, registry.StageRef):
			source = stage_files.get(source.stage_id)
			if source is None:
				raise RuntimeError(f"stage {item.source_ref.stage_id} has not been rendered")
		cmd += f" -i {shlex.quote(str(source))} "
	cmd += f" -filter_complex {shlex.quote(stage.filtergraph())} "
	cmd += f" -map {shlex.quote('[' + stage.output_label + ']')} "
	cmd += " -an -sn -map_metadata -1 "
	cmd += encode_args
	cmd += f" {shlex.quote(output_file)} "
	return cmd

#============================================

class ProgramRenderer():
	def __init__(self, program: emitter.FilterProgram, output_file: str,
		output_format: str, quality: str, fps, pixel_format: str = 'yuv420p',
		cache_dir: str = None, keep_temp: bool = False):
		self.program = program
		self.output_file = output_file
		self.output_format = output_format
		self.quality = quality
		self.fps = fps
		self.pixel_format = pixel_format
		self.cache_dir = cache_dir
		self.keep_temp = keep_temp

	#============================
	def plan_commands(self, cache_dir: str) -> list:
		"""
		Return (stage, output_file, command) for every stage in order.
		"""
		final_args = encoding.output_args(self.output_format, self.quality,
			self.fps, self.pixel_format)
		stage_args = encoding.intermediate_args(self.fps, self.pixel_format)
		stage_files = {}
		commands = []
		run_tag = make_run_tag()
		for stage in self.program.stages:
			if stage.is_final:
				out_file = self.output_file
				encode_args = final_args
			else:
				out_file = os.path.join(cache_dir,
					stage_file_name(stage.stage_id, run_tag))
				encode_args = stage_args
			cmd = build_stage_command(stage, out_file, stage_files, encode_args)
			stage_files[stage.stage_id] = out_file
			commands.append((stage, out_file, cmd))
		return commands

	#============================
	def render(self) -> str:
		t0 = time.time()
		cache_dir = self.cache_dir
		cache_dir_created = False
		if cache_dir is None:
			cache_dir = tempfile.mkdtemp(prefix="slidegraph-run-")
			cache_dir_created = True
		elif not os.path.exists(cache_dir):
			os.makedirs(cache_dir)
		commands = self.plan_commands(cache_dir)
		temp_files = []
		show_progress = len(commands) > 1 and not utils.is_quiet_mode()
		for stage, out_file, cmd in tqdm(commands, desc="stages",
			disable=not show_progress):
			# stale output would hide a failed run
			if os.path.exists(out_file):
				os.remove(out_file)
			utils.runCmd(cmd)
			utils.ensure_file_exists(out_file)
			if not stage.is_final:
				temp_files.append(out_file)
		if not self.keep_temp:
			self._cleanup_temp(temp_files)
			if cache_dir_created:
				shutil.rmtree(cache_dir, ignore_errors=True)
		utils.log(f"Complete in {int(time.time() - t0)} seconds")
		return self.output_file

	#============================
	def _cleanup_temp(self, paths: list) -> None:
		for path in paths:
			if os.path.exists(path):
				os.remove(path)
