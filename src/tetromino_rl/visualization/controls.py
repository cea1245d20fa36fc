from __future__ import annotations

from typing import Dict, List

import pygame

from tetromino_rl.game import Command


KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_j: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_l: Command.MOVE_RIGHT,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_k: Command.SOFT_DROP,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_x: Command.ROTATE_CW,
    pygame.K_UP: Command.ROTATE_CW,
    pygame.K_z: Command.ROTATE_CCW,
    pygame.K_c: Command.HOLD,
    pygame.K_q: Command.QUIT,
    pygame.K_ESCAPE: Command.QUIT,
}

COMMAND_LABELS: Dict[Command, str] = {
    Command.MOVE_LEFT: "left",
    Command.MOVE_RIGHT: "right",
    Command.SOFT_DROP: "drop",
    Command.HARD_DROP: "slam",
    Command.ROTATE_CW: "rot cw",
    Command.ROTATE_CCW: "rot ccw",
    Command.HOLD: "hold",
    Command.QUIT: "quit",
}


def help_lines(bindings: Dict[int, Command] = KEY_TO_COMMAND) -> List[str]:
    """One "label  key, key" line per command, in first-binding order."""
    keys_by_command: Dict[Command, List[str]] = {}
    for key, command in bindings.items():
        keys_by_command.setdefault(command, []).append(pygame.key.name(key))
    return [f"{COMMAND_LABELS[c]:<8}{', '.join(names)}" for c, names in keys_by_command.items()]


def collect_commands(events) -> List[Command]:
    commands: List[Command] = []
    for event in events:
        if event.type == pygame.QUIT:
            commands.append(Command.QUIT)
        elif event.type == pygame.KEYDOWN:
            command = KEY_TO_COMMAND.get(event.key)
            if command is not None:
                commands.append(command)
    return commands
