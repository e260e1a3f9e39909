#!/usr/bin/env python3
# python 3.6+

# Testing of server session state machine (expression list, render, animation frames, export / import).

from decimal import Decimal
import os
import sys
import subprocess
import unittest

import requests

if __name__ == '__main__':
	if len (sys.argv) == 1:
		subprocess.run ([sys.executable, '-m', 'unittest', '-v', os.path.basename (sys.argv [0])])
		sys.exit (0)

M21 = r'\begin{bmatrix}2&1\\0&1\end{bmatrix}'

class Test (unittest.TestCase):
	def test_evaluate (self):
		resp = post ('evaluate', text = ['a = 2', 'a + 1', '\\det(' + M21 + ')', 'y'])

		self.assertEqual (resp ['mode'], 'evaluate')
		self.assertEqual (fields (resp, 'id'), [0, 1, 2, 3])
		self.assertEqual (fields (resp, 'evaluated_tex'), ['2', '3', '2', ''])
		self.assertEqual (fields (resp, 'kind'), ['number', 'number', 'number', None])
		self.assertEqual (fields (resp, 'last_func'), ['', '', 'det', ''])
		self.assertEqual (fields (resp, 'is_assignment'), [True, False, False, False])
		self.assertEqual (fields (resp, 'animation_state'), ['PAUSED'] * 4)

		resp = post ('evaluate', text = 'x = 1')

		self.assertEqual (fields (resp, 'tex'), ['x = 1'])
		self.assertEqual (fields (resp, 'evaluated_tex'), ['1'])

	def test_input (self):
		post ('evaluate', text = ['a = 2', 'a + 1'])

		resp = post ('input', id = 0, text = 'a = 5')

		self.assertEqual (fields (resp, 'evaluated_tex'), ['5', '6'])

		resp = post ('input', id = 1, option = 'visible', value = 'false')

		self.assertEqual (fields (resp, 'visible'), [True, False])

		resp = post ('input', id = 1, option = 'color', value = '#123456')

		self.assertEqual (fields (resp, 'color') [1], '#123456')

		resp = post ('input', id = 1, option = 'color', value = 'notacolor')

		self.assertEqual (resp ['err'] [-1], "ValueError: invalid color 'notacolor'")
		self.assertEqual (fields (post ('input', id = 1), 'color') [1], '#123456')

		resp = post ('input', id = 1, option = 'tex', value = 'x')

		self.assertEqual (resp ['err'] [-1], "ValueError: invalid expression option 'tex'")

	def test_new_delete (self):
		post ('evaluate', text = ['a = 2'])

		resp = post ('new')
		id   = resp ['id']

		self.assertEqual (fields (resp, 'id'), [0, id])
		self.assertGreater (id, 0)

		resp = post ('new', type = 'comment')

		self.assertEqual (fields (resp, 'is_comment'), [False, False, True])

		resp = post ('delete', id = id)

		self.assertEqual (len (resp ['exprs']), 2)
		self.assertNotIn (id, fields (resp, 'id'))

	def test_render (self):
		post ('evaluate', text = [M21, r'\begin{bmatrix}1\\1\end{bmatrix}'])

		resp = post ('render', width = 200, height = 100, center = 1)

		self.assertTrue (resp ['png'].startswith ('data:image/png;base64,'))
		self.assertEqual (Decimal (resp ['step']), 1)
		self.assertEqual (resp ['step_px'], 100)

		resp = post ('render', zoom = -1000)

		self.assertEqual (Decimal (resp ['step']), Decimal ('0.5'))

		resp = post ('render', zoom = 1000, pan = '10,-10')

		self.assertEqual (Decimal (resp ['step']), 1)
		self.assertEqual (resp ['step_px'], 100)

		post ('render', center = 1)

	def test_animate (self):
		post ('evaluate', text = [M21])

		resp = post ('animate', id = 0, fps = 2)

		self.assertEqual (len (resp ['frames']), 5)
		self.assertTrue (all (f.startswith ('data:image/png;base64,') for f in resp ['frames']))
		self.assertEqual (fields (resp, 'animation_state'), ['PAUSED'])

		post ('evaluate', text = ['5'])

		resp = post ('animate', id = 0, fps = 2)

		self.assertEqual (len (resp ['frames']), 1)
		self.assertEqual (fields (resp, 'animation_state'), ['PAUSED'])

	def test_export_import (self):
		post ('evaluate', text = ['A = ' + M21, '\\det(A)'])

		code = post ('export') ['code']

		post ('evaluate', text = ['1'])

		resp = post ('import', code = code)

		self.assertEqual (fields (resp, 'tex'), ['A = ' + M21, '\\det(A)'])
		self.assertEqual (fields (resp, 'evaluated_tex') [1], '2')
		self.assertIn ('err', post ('import', code = 'not base64!'))

	def test_errors (self):
		self.assertEqual (post ('foo') ['err'] [-1], "ValueError: invalid mode 'foo'")
		self.assertEqual (post ('foo') ['mode'], 'foo')
		self.assertIn ('err', post ('new', type = 'bad'))

	def test_get (self):
		resp = requests.get (URL + 'graph.png')

		self.assertEqual (resp.status_code, 200)
		self.assertEqual (resp.headers ['Content-type'], 'image/png')
		self.assertEqual (resp.content [:4], b'\x89PNG')
		self.assertEqual (requests.get (URL + 'nothing').status_code, 404)

def post (mode, **kw):
	return requests.post (URL, dict (kw, mode = mode)).json ()

def fields (resp, name):
	return [e [name] for e in resp ['exprs']]

sys.argv = [os.path.abspath ('server.py'), '--nobrowser', '127.0.0.1:9001']

import server

HTTPD = server.start_server (logging = False)
URL   = f'http://{HTTPD.server_address [0]}:{HTTPD.server_address [1]}/'

if __name__ == '__main__':
	unittest.main ()
