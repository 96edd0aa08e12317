#!/usr/bin/env python3

#============================================

class SlideGraphError(RuntimeError):
	pass

#============================================

class InvalidDescriptor(SlideGraphError):
	def __init__(self, index: int, reason: str):
		self.index = index
		self.reason = reason
		super().__init__(f"node {index}: {reason}")

#============================================

class GraphIntegrityError(SlideGraphError):
	def __init__(self, position: int, reason: str):
		self.position = position
		self.reason = reason
		super().__init__(f"edge {position}: {reason}")

#============================================

class EmptyGraphError(SlideGraphError):
	def __init__(self, reason: str = "graph has no nodes"):
		self.reason = reason
		super().__init__(reason)
