"""Command registry - maps CLI commands to Kodi JSON-RPC methods

Every command the remote understands is described by a CommandDescriptor:
the CLI name, the Kodi method it calls, the help texts and the
ParameterBuilder that turns the raw CLI tokens into the JSON-RPC params.

    krm seek 01:02:03
        -> lookup("seek")                      CommandDescriptor
        -> SeekParameters().build(["01:02:03"])
        -> {"playerid": 1, "value": {"hours": 1, "minutes": 2, ...}}
        -> Player.Seek

The registry is built once and never changes afterwards.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from kodiremote.errors import InvalidParametersError, UnknownCommandError

PLAYER_ID = 1

# Symbolic seek steps understood by Player.Seek
SEEK_STEPS = {
    "+": "smallforward",
    "++": "bigforward",
    "-": "smallbackward",
    "--": "bigbackward",
}

# Cursor movements that take a trailing repeat count: `krm down 3`
REPEATABLE_COMMANDS = frozenset({"up", "down", "left", "right"})

TIME_COMPONENT_MIN = 0
TIME_COMPONENT_MAX = 59

_INTEGER = re.compile(r"[+-]?[0-9]+")


# ============================================================
# PARAMETER BUILDERS
# ============================================================

class ParameterBuilder(ABC):
    """Turns raw CLI tokens into the params of a JSON-RPC request.

    Builders are stateless; build() returns a new dict on every call and
    raises InvalidParametersError if the tokens can't be used.
    """

    @abstractmethod
    def build(self, tokens: list[str]) -> dict[str, Any]:
        ...


class NoParameters(ParameterBuilder):
    """Ignores every token, the request is sent without params"""

    def build(self, tokens: list[str]) -> dict[str, Any]:
        return {}


class FixedParameters(ParameterBuilder):
    """Always sends the same params"""

    def __init__(self, params: Mapping[str, Any]):
        self._params = dict(params)

    def build(self, tokens: list[str]) -> dict[str, Any]:
        return dict(self._params)


class SpeedParameters(ParameterBuilder):
    """Passes the first token through as the playback speed"""

    def build(self, tokens: list[str]) -> dict[str, Any]:
        if not tokens:
            raise InvalidParametersError(
                'not enough parameters, see "help speed" for usage information'
            )
        return {"playerid": PLAYER_ID, "speed": tokens[0]}


class SeekParameters(ParameterBuilder):
    """Either a symbolic step (+, ++, -, --) or an absolute [hh:]mm:ss time"""

    def build(self, tokens: list[str]) -> dict[str, Any]:
        if not tokens:
            raise InvalidParametersError(
                'not enough parameters, see "help seek" for usage information'
            )

        step = SEEK_STEPS.get(tokens[0])
        if step is not None:
            return {"playerid": PLAYER_ID, "value": step}

        return {"playerid": PLAYER_ID, "value": parse_seek_time(tokens[-1])}


def parse_time_component(raw: str) -> int:
    """Parse one part of a seek time, which has to be within 0..59"""
    if _INTEGER.fullmatch(raw):
        value = int(raw)
        if TIME_COMPONENT_MIN <= value <= TIME_COMPONENT_MAX:
            return value
    raise InvalidParametersError(
        f"a time value needs to be between {TIME_COMPONENT_MIN} and "
        f'{TIME_COMPONENT_MAX}, but was "{raw}"'
    )


def parse_seek_time(text: str) -> dict[str, int]:
    """Parse "mm:ss" or "hh:mm:ss" into the time object Player.Seek expects.

    Hours are held to the same 0..59 range as minutes and seconds.
    """
    parts = text.split(":")
    hours = 0
    if len(parts) == 3:
        hours = parse_time_component(parts[0])
        parts = parts[1:]

    if len(parts) != 2:
        raise InvalidParametersError(
            f'illegal parameter "{text}", see "help seek" for usage information'
        )

    minutes = parse_time_component(parts[0])
    seconds = parse_time_component(parts[1])
    return {
        "hours": hours,
        "minutes": minutes,
        "seconds": seconds,
        "milliseconds": 0,
    }


def resolve_repeat_count(command: str, tokens: list[str]) -> tuple[int, list[str]]:
    """Split a trailing repeat count off the tokens of a cursor movement.

    Returns the repeat count and the remaining tokens. Anything that isn't a
    positive integer is left in place and the count defaults to 1.
    """
    tokens = list(tokens)
    if command not in REPEATABLE_COMMANDS or not tokens:
        return 1, tokens

    last = tokens[-1]
    if not _INTEGER.fullmatch(last):
        return 1, tokens
    count = int(last)
    if count < 1:
        return 1, tokens
    return count, tokens[:-1]


# ============================================================
# DESCRIPTORS AND REGISTRY
# ============================================================

@dataclass(frozen=True)
class CommandDescriptor:
    """One CLI command and the Kodi method behind it"""

    name: str
    method: str
    description: str
    builder: ParameterBuilder = field(default_factory=NoParameters, compare=False)
    parameters: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def repeatable(self) -> bool:
        return self.name in REPEATABLE_COMMANDS

    def build_params(self, tokens: list[str]) -> dict[str, Any]:
        return self.builder.build(list(tokens))


class CommandRegistry:
    """Read-only lookup table of CommandDescriptors keyed by CLI name"""

    def __init__(self, descriptors: list[CommandDescriptor]):
        commands: dict[str, CommandDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in commands:
                raise ValueError(f"Command '{descriptor.name}' is registered twice")
            commands[descriptor.name] = descriptor
        self._commands = MappingProxyType(commands)

    def lookup(self, name: str) -> CommandDescriptor:
        descriptor = self._commands.get(name)
        if descriptor is None:
            raise UnknownCommandError(name)
        return descriptor

    def names(self) -> list[str]:
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)


def build_registry() -> CommandRegistry:
    """Create the registry of all commands the remote supports"""
    player = FixedParameters({"playerid": PLAYER_ID})

    return CommandRegistry([
        # Player
        CommandDescriptor("play", "Player.PlayPause",
                          "Resumes the current playback from pause state.", player),
        CommandDescriptor("pause", "Player.PlayPause",
                          "Pauses the current playback.", player),
        CommandDescriptor("stop", "Player.Stop",
                          "Stops the current playback.", player),
        CommandDescriptor("mute", "Application.SetMute",
                          "Mutes or unmutes the audio.",
                          FixedParameters({"mute": "toggle"})),
        CommandDescriptor("seek", "Player.Seek",
                          "Jumps to the given time or steps back/forth.",
                          SeekParameters(),
                          {
                              "-/+": "Jump a small step back/forth.",
                              "--/++": "Jump a big step back/forth.",
                              "[hh:]mm:ss": "Jump to hours:minutes:seconds (hours optional).",
                          }),
        CommandDescriptor("speed", "Player.Speed",
                          "Sets the playback speed.",
                          SpeedParameters(),
                          {"speed": "Speed as integer"}),

        # Input
        CommandDescriptor("action", "Input.Select", "Selects the current item."),
        CommandDescriptor("context", "Input.ContextMenu", "Opens the context menu."),
        CommandDescriptor("info", "Input.Info", "Opens the info view."),
        CommandDescriptor("home", "Input.Home", "Returns to the home screen."),
        CommandDescriptor("back", "Input.Back", "Returns to the previous view."),
        CommandDescriptor("left", "Input.Left",
                          "Moves the cursor one item to the left.",
                          parameters={"n": "(optional) Number of steps."}),
        CommandDescriptor("right", "Input.Right",
                          "Moves the cursor one item to the right.",
                          parameters={"n": "(optional) Number of steps."}),
        CommandDescriptor("up", "Input.Up",
                          "Moves the cursor one item up.",
                          parameters={"n": "(optional) Number of steps."}),
        CommandDescriptor("down", "Input.Down",
                          "Moves the cursor one item down.",
                          parameters={"n": "(optional) Number of steps."}),

        # GUI
        # TODO: build title/message/displaytime params, Kodi currently gets none
        CommandDescriptor("notify", "GUI.ShowNotification",
                          "Displays a notification on the screen.",
                          NoParameters(),
                          {
                              "title": "The title of the notification.",
                              "message": "The message of the notification.",
                              "displaytime": "(optional) The time in milliseconds the notification is displayed.",
                          }),

        # Library
        CommandDescriptor("clean", "VideoLibrary.Clean",
                          "Cleans the video library from non-existent items."),
        CommandDescriptor("update", "VideoLibrary.Scan",
                          "Scans the video sources for new library items."),
    ])


DEFAULT_REGISTRY = build_registry()


def lookup(name: str) -> CommandDescriptor:
    """Find a command in the default registry"""
    return DEFAULT_REGISTRY.lookup(name)
