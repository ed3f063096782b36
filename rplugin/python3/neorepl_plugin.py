"""Remote plugin entry point; Neovim's python3 host loads this file."""

from neorepl.frontends.nvim.plugin import Neorepl

__all__ = ["Neorepl"]
