"""Клавиатура → команды колибри"""

import pygame

from birds.hummingbird import HeuristicInput


# W/S вперёд/назад, A/D влево/вправо, E/C вверх/вниз,
# стрелки вверх/вниз: pitch, стрелки влево/вправо: yaw
KEY_BINDINGS = {
    'forward': pygame.K_w,
    'backward': pygame.K_s,
    'left': pygame.K_a,
    'right': pygame.K_d,
    'up': pygame.K_e,
    'down': pygame.K_c,
    'pitch_up': pygame.K_UP,
    'pitch_down': pygame.K_DOWN,
    'yaw_left': pygame.K_LEFT,
    'yaw_right': pygame.K_RIGHT,
}


def input_from_keys(pressed) -> HeuristicInput:
    """
    Собрать HeuristicInput из состояния клавиш.

    Args:
        pressed: результат pygame.key.get_pressed() (или любой индексируемый по коду клавиши объект)
    """
    return HeuristicInput(**{field: bool(pressed[key]) for field, key in KEY_BINDINGS.items()})


def keyboard_input() -> HeuristicInput:
    """Текущее состояние клавиатуры pygame"""
    return input_from_keys(pygame.key.get_pressed())
