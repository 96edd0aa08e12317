#!/usr/bin/env python3

import os
import yaml
from slidegraphlib.core import batching
from slidegraphlib.core import emitter
from slidegraphlib.core import encoding
from slidegraphlib.core import planner
from slidegraphlib.core import utils

#============================================

SOURCE_KEYS = {
	'image': 'still',
	'clip': 'clip',
}

# frame rate per output kind when profile.fps is unset
DEFAULT_FPS = {
	emitter.OUTPUT_VIDEO: 30,
	emitter.OUTPUT_GIF: 15,
}

#============================================

class ProjectData():
	def __init__(self):
		self.yaml_file = None
		self.base_dir = None
		self.output_override = None
		self.data = {}
		self.profile = {}
		self.defaults = {}
		self.nodes = []
		self.edges = []
		self.output = {}

#============================================

class ProjectLoader():
	def __init__(self, yaml_file: str, output_override: str = None,
		max_batch_inputs: int = None, quality: str = None):
		self.yaml_file = yaml_file
		self.output_override = output_override
		self.max_batch_inputs = max_batch_inputs
		self.quality = quality

	#============================
	def load(self) -> ProjectData:
		project = ProjectData()
		project.yaml_file = self.yaml_file
		project.base_dir = os.path.dirname(os.path.abspath(self.yaml_file))
		project.output_override = self.output_override
		project.data = self._load_yaml()
		self._validate_required_keys(project.data)
		project.output = self._parse_output(project, project.data.get('output', {}))
		project.profile = self._parse_profile(project.data.get('profile'),
			project.output['kind'])
		project.defaults = self._parse_defaults(project.data.get('defaults', {}))
		slides = self._enabled_slides(project.data.get('slides'))
		project.nodes = self._parse_nodes(project, slides)
		project.edges = self._parse_edges(project, slides,
			project.data.get('transitions', []))
		return project

	#============================
	def _load_yaml(self) -> dict:
		file_size = os.path.getsize(self.yaml_file)
		if file_size > 10 ** 7:
			raise RuntimeError("yaml file is larger than 10MB")
		with open(self.yaml_file, 'r') as data_file:
			data = yaml.safe_load(data_file)
		if not isinstance(data, dict):
			raise RuntimeError("project yaml must be a mapping at the top level")
		return data

	#============================
	def _validate_required_keys(self, data: dict) -> None:
		if data.get('slidegraph') != 1:
			raise RuntimeError("slidegraph must be set to 1")
		required_keys = ('profile', 'slides')
		for key in required_keys:
			if key not in data:
				raise RuntimeError(f"missing required key: {key}")
		if data.get('output') is None and self.output_override is None:
			raise RuntimeError("missing required key: output")

	#============================
	def _parse_profile(self, profile: dict, output_kind: str) -> dict:
		if not isinstance(profile, dict):
			raise RuntimeError("profile must be a mapping")
		fps = profile.get('fps')
		if fps is None:
			fps = DEFAULT_FPS[output_kind]
		fps = utils.parse_fps(fps)
		resolution = profile.get('resolution')
		if not resolution or len(resolution) != 2:
			raise RuntimeError("profile.resolution must be [width, height]")
		width = int(resolution[0])
		height = int(resolution[1])
		if width <= 0 or height <= 0:
			raise RuntimeError("profile.resolution values must be positive")
		pixel_format = profile.get('pixel_format', 'yuv420p')
		return {
			'fps': fps,
			'width': width,
			'height': height,
			'pixel_format': pixel_format,
		}

	#============================
	def _parse_defaults(self, defaults: dict) -> dict:
		if defaults is None:
			defaults = {}
		if not isinstance(defaults, dict):
			raise RuntimeError("defaults must be a mapping")
		duration = utils.parse_timecode(defaults.get('duration', 1))
		transition = None
		if defaults.get('transition') is not None:
			transition = self._parse_transition_value(defaults['transition'],
				"defaults.transition")
		return {
			'duration': duration,
			'transition': transition,
		}

	#============================
	def _parse_transition_value(self, value, where: str) -> dict:
		if isinstance(value, str):
			return {'effect': value, 'duration': None}
		if not isinstance(value, dict):
			raise RuntimeError(f"{where} must be an effect name or a mapping")
		effect = value.get('effect', value.get('type'))
		if effect is None:
			raise RuntimeError(f"{where}.effect is required")
		return {'effect': effect, 'duration': value.get('duration')}

	#============================
	def _enabled_slides(self, slides) -> list:
		if not isinstance(slides, list) or len(slides) == 0:
			raise RuntimeError("slides must be a non-empty list")
		enabled = []
		for number, slide in enumerate(slides):
			if not isinstance(slide, dict):
				raise RuntimeError(f"slides[{number}] must be a mapping")
			if slide.get('enabled') is False:
				continue
			enabled.append(slide)
		if len(enabled) == 0:
			raise RuntimeError("all slides are disabled")
		return enabled

	#============================
	def _resolve_path(self, project: ProjectData, path: str) -> str:
		path = os.path.expanduser(str(path))
		if os.path.isabs(path):
			return path
		return os.path.join(project.base_dir, path)

	#============================
	def _parse_nodes(self, project: ProjectData, slides: list) -> list:
		nodes = []
		for index, slide in enumerate(slides):
			present = [key for key in SOURCE_KEYS if slide.get(key) is not None]
			if len(present) != 1:
				raise RuntimeError(f"slide {index} needs exactly one of image or clip")
			key = present[0]
			descriptor = {
				'source': self._resolve_path(project, slide[key]),
				'duration': slide.get('duration', project.defaults['duration']),
				'kind': SOURCE_KEYS[key],
			}
			if slide.get('filters') is not None:
				descriptor['filters'] = slide['filters']
			nodes.append(descriptor)
		return nodes

	#============================
	def _parse_edges(self, project: ProjectData, slides: list, explicit) -> list:
		if explicit is None:
			explicit = []
		if not isinstance(explicit, list):
			raise RuntimeError("transitions must be a list")
		edges = []
		covered = set()
		for item in explicit:
			if not isinstance(item, dict):
				raise RuntimeError("transitions entries must be mappings")
			edges.append(dict(item))
			covered.add(item.get('after'))
		for index, slide in enumerate(slides):
			if slide.get('transition') is None:
				continue
			if index == 0:
				raise RuntimeError("the first slide cannot have a transition into it")
			value = self._parse_transition_value(slide['transition'],
				f"slide {index} transition")
			value['after'] = index - 1
			edges.append(value)
			covered.add(index - 1)
		default_transition = project.defaults['transition']
		if default_transition is not None:
			for index in range(len(slides) - 1):
				if index in covered:
					continue
				value = dict(default_transition)
				value['after'] = index
				edges.append(value)
		return edges

	#============================
	def _parse_output(self, project: ProjectData, output: dict) -> dict:
		if output is None:
			output = {}
		if not isinstance(output, dict):
			raise RuntimeError("output must be a mapping")
		output_file = self.output_override or output.get('file')
		if output_file is None:
			raise RuntimeError("output.file is required")
		output_file = self._resolve_path(project, output_file)
		output_format = output.get('format')
		if self.output_override is not None or output_format is None:
			output_format = encoding.format_from_path(output_file)
		output_format = str(output_format).lower()
		output_kind = encoding.output_kind(output_format)
		quality = self.quality or output.get('quality', encoding.DEFAULT_QUALITY)
		encoding.get_quality(quality)
		max_batch_inputs = self.max_batch_inputs
		if max_batch_inputs is None:
			max_batch_inputs = output.get('max_batch_inputs',
				batching.DEFAULT_MAX_BATCH_INPUTS)
		max_batch_inputs = int(max_batch_inputs)
		if max_batch_inputs < 2:
			raise RuntimeError("output.max_batch_inputs must be at least 2")
		cut_join = output.get('cut_join', planner.JOIN_CONCAT)
		if cut_join not in planner.CUT_JOINS:
			raise RuntimeError(f"output.cut_join must be one of {', '.join(planner.CUT_JOINS)}")
		return {
			'file': output_file,
			'format': output_format,
			'kind': output_kind,
			'quality': quality,
			'max_batch_inputs': max_batch_inputs,
			'cut_join': cut_join,
		}
