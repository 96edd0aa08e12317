
import argparse
import os
import re
import shlex
import stat
from slidegraphlib.core.project import SlideGraphProject

#============================================

def parse_args():
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(description="Export a slidegraph YAML project to a bash script")
	parser.add_argument('-y', '--yaml', dest='yamlfile', required=True,
		help='main yaml file that outlines the slideshow')
	parser.add_argument('-o', '--output', dest='output_file',
		help='output script path')
	parser.add_argument('-c', '--cache-dir', dest='cache_dir', default='slidegraph-stages',
		help='directory the script writes intermediate stages to')
	args = parser.parse_args()
	return args

#============================================
class ShellExporter():
	def __init__(self, yaml_file: str, output_file: str = None,
		cache_dir: str = 'slidegraph-stages'):
		self.yaml_file = yaml_file
		self.output_file = output_file or self._default_output_path()
		self.cache_dir = cache_dir
		self.project = SlideGraphProject(self.yaml_file, dry_run=True)

	#============================
	def _default_output_path(self) -> str:
		base, _ = os.path.splitext(self.yaml_file)
		return base + ".sh"

	#============================
	def build_lines(self) -> list:
		program = self.project.compile()
		renderer = self.project.make_renderer(program)
		commands = renderer.plan_commands(self.cache_dir)
		lines = ['#!/bin/bash', 'set -e', '']
		if len(commands) > 1:
			lines.append(f"mkdir -p {shlex.quote(self.cache_dir)}")
		stage_files = []
		for stage, out_file, cmd in commands:
			lines.append(f"# stage {stage.stage_id}")
			lines.append(re.sub("  *", " ", cmd.strip()))
			if not stage.is_final:
				stage_files.append(out_file)
		# only the stage files this script wrote, never the cache dir itself
		for out_file in stage_files:
			lines.append(f"rm -f {shlex.quote(out_file)}")
		return lines

	#============================
	def export(self) -> None:
		lines = self.build_lines()
		with open(self.output_file, 'w') as handle:
			handle.write('\n'.join(lines))
			handle.write('\n')
		mode = os.stat(self.output_file).st_mode
		os.chmod(self.output_file, mode | stat.S_IXUSR)

#============================================

def main():
	args = parse_args()
	exporter = ShellExporter(args.yamlfile, args.output_file, args.cache_dir)
	exporter.export()
	print(f"wrote {exporter.output_file}")

if __name__ == '__main__':
	main()
