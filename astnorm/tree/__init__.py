"""Generic AST tree handling for JSON fixtures.

Fixture trees are the plain values ``json.loads`` returns. This package
classifies them into a closed set of node kinds and provides the passes
that rewrite them:

- Dash stripping (term names lose their leading ``-``)
- Type pruning (``type`` fields implied by tree position are dropped)
- Text splitting (multi-line ``TextElement`` values become one element per line)
"""
