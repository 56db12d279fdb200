from .tree import render_tree, build_children

from .contents import render_contents, read_text, BANNER, BINARY_PLACEHOLDER
