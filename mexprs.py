# Ordered list of expression records which threads the variable scope through analysis.

import base64
import json
import random

from matplotlib.colors import hsv_to_rgb, is_color_like, to_hex

from manalyze import Analysis, Scope, analyze
from mframes import DEFAULT_DURATION, AnimationState

def random_color ():
	return to_hex (hsv_to_rgb ((random.random (), 0.9, 0.8)))

def _check_color (color):
	if not isinstance (color, str) or not is_color_like (color):
		raise ValueError (f'invalid color {color!r}')

	return color

def matrix_tex (rows, cols): # empty matrix template
	row = '&' * (cols - 1)
	mat = '\\\\' * (rows - 1) if not row else '\\\\'.join ([row] * rows)

	return f'\\begin{{bmatrix}}{mat}\\end{{bmatrix}}'

#...............................................................................................
class ExprData:
	"""One expression record. Records are treated as values, a change is made
	by replace () which returns an updated copy."""

	FIELDS = {
		'id'                : -1,
		'tex'               : '',
		'tex_to_insert'     : '',
		'is_comment'        : False,
		'animation_state'   : AnimationState.PAUSED,
		'evaluated_tex'     : '',
		'evaluated_value'   : None,
		'kind'              : None,
		'last_func'         : '',
		'last_args'         : (),
		'is_assignment'     : False,
		'color'             : '#000000',
		'visible'           : True,
		'show_minor'        : True,
		'show_coords'       : True,
		'animation_duration': DEFAULT_DURATION,
	}

	OPTIONS = {'color', 'visible', 'show_minor', 'show_coords', 'animation_duration'}
	EXPORT  = ('id', 'tex', 'is_comment', 'color', 'visible', 'show_minor', 'show_coords', 'animation_duration')

	__slots__ = list (FIELDS)

	def __init__ (self, **kw):
		for name, default in ExprData.FIELDS.items ():
			setattr (self, name, kw.pop (name, default))

		if kw:
			raise TypeError (f'unknown expression fields {", ".join (kw)}')

	def __repr__ (self):
		return f'ExprData (id = {self.id!r}, tex = {self.tex!r}, kind = {self.kind!r}, evaluated_tex = {self.evaluated_tex!r})'

	def asdict (self):
		return {name: getattr (self, name) for name in ExprData.FIELDS}

	def replace (self, **kw):
		return ExprData (**dict (self.asdict (), **kw))

	def with_analysis (self, analysis):
		return self.replace (evaluated_tex = analysis.evaluated_tex, evaluated_value = analysis.evaluated_value, kind = analysis.kind,
				last_func = analysis.last_func, last_args = analysis.last_args, is_assignment = analysis.is_assignment)

	def export (self):
		return {name: getattr (self, name) for name in ExprData.EXPORT}

class ExprList:
	"""Owner of the ordered expression records. Every edit of a math
	expression re-analyzes the whole list from an empty scope. Operations on
	ids which do not exist are ignored."""

	def __init__ (self, exprs = None):
		if exprs is None:
			self.last_id = 0
			self.exprs   = [ExprData (id = 0, color = random_color ())]

		else:
			self.last_id = -1

			self.load (exprs)

	def __iter__ (self):
		return iter (self.exprs)

	def __len__ (self):
		return len (self.exprs)

	def _index (self, id):
		for i, expr in enumerate (self.exprs):
			if expr.id == id:
				return i

		return None

	def get (self, id):
		idx = self._index (id)

		return None if idx is None else self.exprs [idx]

	def new (self, type = 'math'):
		if type not in {'math', 'comment'}:
			raise ValueError (f'invalid expression type {type!r}')

		self.last_id += 1

		self.exprs.append (ExprData (id = self.last_id, color = random_color (), is_comment = type == 'comment'))

		return self.last_id

	def update (self, id, **kw):
		idx = self._index (id)

		if idx is not None:
			self.exprs [idx] = self.exprs [idx].replace (**kw)

	def delete (self, id):
		self.exprs = [e for e in self.exprs if e.id != id]

	def reorder (self, idx1, idx2): # move expression at idx1 to idx2
		exprs = list (self.exprs)

		exprs.insert (idx2, exprs.pop (idx1))

		self.exprs = exprs

	def input (self, id, tex):
		expr = self.get (id)

		if expr is None:
			return

		self.update (id, tex = tex, tex_to_insert = '')

		if not expr.is_comment:
			self.evaluate ()

	def insert_tex (self, id, tex):
		self.update (id, tex_to_insert = tex)

	def option (self, id, name, value):
		if name not in ExprData.OPTIONS:
			raise ValueError (f'invalid expression option {name!r}')

		if name == 'color':
			_check_color (value)

		self.update (id, **{name: value})

	def request_animation (self, id):
		expr = self.get (id)

		if expr is not None and expr.animation_state != AnimationState.RUNNING:
			self.update (id, animation_state = AnimationState.REQUESTED)

	def evaluate (self):
		scope = Scope ()

		for i, expr in enumerate (self.exprs):
			if expr.is_comment:
				continue

			analysis, scope = analyze (expr.tex, scope)
			self.exprs [i]  = expr.with_analysis (analysis)

		return scope

	def load (self, exprs): # list of ExprData or dicts of fields
		exprs = [e if isinstance (e, ExprData) else ExprData (**e) for e in exprs]

		for expr in exprs:
			_check_color (expr.color)

		for expr in exprs:
			self.last_id = max (self.last_id, expr.id)

		self.exprs = [e.with_analysis (Analysis ()) for e in exprs]

		self.evaluate ()

	def export (self):
		return base64.b64encode (json.dumps ([e.export () for e in self.exprs]).encode ()).decode ()

	def import_ (self, code): # raises ValueError on invalid code
		exprs = json.loads (base64.b64decode (code.encode (), validate = True).decode ())

		if not isinstance (exprs, list) or not all (isinstance (e, dict) for e in exprs):
			raise ValueError ('invalid import code')

		try:
			self.load ([{n: e [n] for n in ExprData.EXPORT if n in e} for e in exprs])
		except TypeError:
			raise ValueError ('invalid import code') from None
