"""
Kulki core Python package.

Rules engine for the marble lines game: a rectangular grid of coloured
marbles, moves along free routes, and lines that clear once they are long
enough. Modules:
- board.py: Grid, Coord, Color, Marble
- paths.py: route finding and reachability
- lines.py: line detection and removal
- spawn.py: colour drawing and marble spawning
- score.py: session score and high-score stores
- state.py: Phase, GameSnapshot
- engine.py: TurnEngine and the Presenter protocol
- presenters.py: RecordingPresenter
"""
