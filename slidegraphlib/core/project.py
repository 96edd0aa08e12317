#!/usr/bin/env python3

from slidegraphlib.core import compiler
from slidegraphlib.core import utils
from slidegraphlib.core.loader import ProjectLoader
from slidegraphlib.media.ffmpeg_render import ProgramRenderer

#============================================

class SlideGraphProject():
	def __init__(self, yaml_file: str, output_override: str = None,
		dry_run: bool = False, keep_temp: bool = False, cache_dir: str = None,
		max_batch_inputs: int = None, quality: str = None):
		loader = ProjectLoader(yaml_file, output_override=output_override,
			max_batch_inputs=max_batch_inputs, quality=quality)
		self._project = loader.load()
		self.dry_run = dry_run
		self.keep_temp = keep_temp
		self.cache_dir = cache_dir
		self.yaml_file = self._project.yaml_file
		self.profile = self._project.profile
		self.nodes = self._project.nodes
		self.edges = self._project.edges
		self.output = self._project.output
		self.target = compiler.make_target(
			self.profile['width'],
			self.profile['height'],
			fps=self.profile['fps'],
			output_kind=self.output['kind'],
			max_batch_inputs=self.output['max_batch_inputs'],
			pixel_format=self.profile['pixel_format'],
			cut_join=self.output['cut_join'],
		)

	#============================
	def compile(self):
		return compiler.compile_graph(self.nodes, self.edges, self.target)

	#============================
	def make_renderer(self, program) -> ProgramRenderer:
		return ProgramRenderer(program, self.output['file'], self.output['format'],
			self.output['quality'], self.profile['fps'],
			pixel_format=self.profile['pixel_format'], cache_dir=self.cache_dir,
			keep_temp=self.keep_temp)

	#============================
	def summarize(self, program) -> None:
		utils.log(f"{len(self.nodes)} slides, {len(program.stages)} stage(s), "
			f"{utils.format_number(program.total_duration)} seconds")
		for event in program.timeline:
			utils.log(f"  after {event.after_index}: {event.join} "
				f"{event.engine_effect} duration={utils.format_number(event.duration)} "
				f"offset={utils.format_number(event.offset)}")

	#============================
	def run(self) -> None:
		program = self.compile()
		self.summarize(program)
		if self.dry_run:
			utils.log("dry run: compile complete")
			return
		self.make_renderer(program).render()
		utils.log(f"wrote {self.output['file']}")
