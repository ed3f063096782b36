"""Neovim frontend.

Install the package in the Python environment Neovim uses, put
`rplugin/python3/neorepl_plugin.py` on the runtimepath and run `:UpdateRemotePlugins`.
Then `:Repl` opens a REPL buffer.
"""
