"""lfebuild - LFE compile step for Erlang application builds.

Discovers LFE (*.lfe) sources, compiles an ordered list of "first files"
before everything else, and reports compiler warnings and errors.
"""

__version__ = "0.3.0"
