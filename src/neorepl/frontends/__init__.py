"""Frontends - user interfaces for neorepl.

Each frontend supplies a Host and routes keys to sessions; the engine in
neorepl.core knows nothing about them.

Submodules:
    cli/    Terminal REPL and file runner (the `neorepl` command)
    nvim/   Neovim remote plugin
"""
