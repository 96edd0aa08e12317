#!/usr/bin/env python3

import argparse
import yaml
from slidegraphlib.core import utils
from slidegraphlib.core.project import SlideGraphProject

#============================================

def parse_args():
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(description="Slideshow filter graph compiler")
	parser.add_argument('-y', '--yaml', dest='yamlfile', required=True,
		help='main yaml file that outlines the slideshow')
	parser.add_argument('-o', '--output', dest='output_file',
		help='override output file from yaml')
	parser.add_argument('-n', '--dry-run', dest='dry_run', action='store_true',
		help='compile only, do not render')
	parser.add_argument('-p', '--dump-plan', dest='dump_plan', action='store_true',
		help='print the compiled filter program as yaml')
	parser.add_argument('-b', '--max-batch-inputs', dest='max_batch_inputs', type=int,
		help='override the per-stage input ceiling')
	parser.add_argument('-q', '--quality', dest='quality',
		choices=('web', 'standard', 'high', 'ultra'),
		help='override output quality preset')
	parser.add_argument('-c', '--cache-dir', dest='cache_dir',
		help='directory for intermediate stage files')
	parser.add_argument('-k', '--keep-temp', dest='keep_temp',
		help='keep intermediate stage files', action='store_true')
	parser.add_argument('-K', '--no-keep-temp', dest='keep_temp',
		help='remove intermediate stage files', action='store_false')
	parser.add_argument('--quiet', dest='quiet', action='store_true',
		help='suppress progress output')
	parser.set_defaults(keep_temp=False)
	args = parser.parse_args()
	return args

#============================================

def main():
	args = parse_args()
	if args.quiet:
		utils.set_quiet_mode(True)
	project = SlideGraphProject(args.yamlfile, output_override=args.output_file,
		dry_run=args.dry_run, keep_temp=args.keep_temp, cache_dir=args.cache_dir,
		max_batch_inputs=args.max_batch_inputs, quality=args.quality)
	if args.dump_plan:
		program = project.compile()
		print(yaml.safe_dump(program.to_dict(), sort_keys=False))
		return
	project.run()


if __name__ == '__main__':
	main()
