# Animation of matrix transitions driven by explicit clock ticks.

from enum import Enum
import os
import sys
import time

DEFAULT_DURATION = 2000 # ms
FPS              = 60

def set_fps (fps):
	global FPS
	FPS = fps

class AnimationState (Enum):
	PAUSED    = 1
	REQUESTED = 2
	RUNNING   = 3

def ease_in_out_cubic (x):
	return 4 * x * x * x if x < 0.5 else 1 - (-2 * x + 2) ** 3 / 2

def interpolate (initial, final, fraction): # matrices as tuples of rows of floats
	t = ease_in_out_cubic (min (fraction, 1))

	return tuple (tuple (i + (f - i) * t for i, f in zip (ri, rf)) for ri, rf in zip (initial, final))

#...............................................................................................
class MatrixFrame:
	"""Callable drawing one frame of a transition from initial to final matrix
	given the elapsed time in ms. before () is called first to redraw whatever
	lies beneath the frame, then draw (matrix) with the interpolated matrix."""

	def __init__ (self, initial, final, duration, draw, before = None):
		self.initial  = initial
		self.final    = final
		self.duration = duration
		self.draw     = draw
		self.before   = before
		self.last     = None # last matrix drawn

	def __call__ (self, elapsed):
		self.last = interpolate (self.initial, self.final, elapsed / self.duration if self.duration > 0 else 1)

		if self.before:
			self.before ()

		self.draw (self.last)

class Animation:
	__slots__ = ['id', 'draw', 'duration', 'start']

	def __init__ (self, id, draw, duration = DEFAULT_DURATION, start = None):
		self.id       = id
		self.draw     = draw
		self.duration = duration
		self.start    = start # time of first frame

	def __repr__ (self):
		return f'Animation ({self.id!r}, {self.draw!r}, {self.duration!r}, {self.start!r})'

	def frame (self, now): # returns True if more frames follow
		if self.start is None:
			self.start = now

		elapsed = now - self.start

		self.draw (elapsed)

		return elapsed < self.duration

class Animator:
	"""Owns running animations of expressions. exprs must provide get (id)
	returning a record with animation_state and animation_duration and update
	(id, **kw). animate is the callback handed to the renderer, tick (now) is
	called by the host once per frame."""

	def __init__ (self, exprs):
		self.exprs      = exprs
		self.animations = {}

	@property
	def running (self):
		return bool (self.animations)

	def animate (self, id, draw_frame):
		expr = self.exprs.get (id)

		if expr is None:
			return

		if expr.animation_state == AnimationState.RUNNING or id in self.animations: # already running, request ignored
			return

		self.exprs.update (id, animation_state = AnimationState.RUNNING)

		self.animations [id] = Animation (id, draw_frame, expr.animation_duration)

	def tick (self, now):
		for anim in list (self.animations.values ()):
			if not anim.frame (now):
				del self.animations [anim.id]

				self.exprs.update (anim.id, animation_state = AnimationState.PAUSED)

				if os.environ.get ('MITRAS_DEBUG'):
					print ('animation done:', anim.id, file = sys.stderr)

		return self.running

	def run (self, clock = None, sleep = time.sleep, fps = None): # loop ticks until all animations done, returns frame count
		clock  = clock or (lambda: time.monotonic () * 1000)
		frames = 0

		while self.animations:
			frames += 1

			if self.tick (clock ()):
				sleep (1 / (fps or FPS))

		return frames
