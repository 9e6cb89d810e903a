"""
Sprouts CLI - Command-line interface for the Sprouts engine.

Games are exchanged as the engine's JSON snapshots, so every command can
read from a file or stdin and write to a file or stdout.

Usage:
    sprouts-cli new --points 3 --output game.json
    sprouts-cli moves game.json
    sprouts-cli apply game.json point-0 point-1 --output game.json
    sprouts-cli play --points 4 --seed 7
    sprouts-cli check game.json
"""

__version__ = "1.0.0"
