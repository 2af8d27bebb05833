"""Karel the robot: a grid-world teaching environment.

Student programs import the flat command surface:

    from karel import *

    load_world("worlds/2x1.w")
    move()
    if front_is_blocked():
        turn_left()
    finish()
"""

from karel.facade import (
    beepers_present,
    enable_csv_output,
    enable_prompt_before_action,
    facing_east,
    facing_north,
    facing_south,
    facing_west,
    finish,
    front_is_blocked,
    front_is_clear,
    get_simulator,
    has_beepers_in_bag,
    left_is_blocked,
    left_is_clear,
    load_world,
    move,
    no_beepers_in_bag,
    no_beepers_present,
    not_facing_east,
    not_facing_north,
    not_facing_south,
    not_facing_west,
    pick_beeper,
    put_beeper,
    reset_simulator,
    right_is_blocked,
    right_is_clear,
    turn_left,
)
from karel.sim.world_loader import InvalidWorldFile

__all__ = [
    "InvalidWorldFile",
    "beepers_present",
    "enable_csv_output",
    "enable_prompt_before_action",
    "facing_east",
    "facing_north",
    "facing_south",
    "facing_west",
    "finish",
    "front_is_blocked",
    "front_is_clear",
    "has_beepers_in_bag",
    "left_is_blocked",
    "left_is_clear",
    "load_world",
    "move",
    "no_beepers_in_bag",
    "no_beepers_present",
    "not_facing_east",
    "not_facing_north",
    "not_facing_south",
    "not_facing_west",
    "pick_beeper",
    "put_beeper",
    "right_is_blocked",
    "right_is_clear",
    "turn_left",
]
