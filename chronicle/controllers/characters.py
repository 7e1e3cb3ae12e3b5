"""Controllers for characters."""

from http import HTTPStatus as status
from typing import Any, Optional

from .. import domain
from ..auth.authorization import authorize
from ..exceptions import NotFound
from ..services import characters
from ..services.exceptions import NoSuchCharacter, NoSuchUser
from .util import ResponseData, get_payload, require, optional, parse_id


def list_characters(logged_user: domain.LoggedUser,
                    user_id: str) -> ResponseData:
    user_id = parse_id(user_id)
    authorize(logged_user, user_id)
    return [domain.to_dict(character) for character
            in characters.list_characters(user_id)], status.OK, {}


def get_character(logged_user: domain.LoggedUser, user_id: str,
                  character_id: str) -> ResponseData:
    user_id, character_id = parse_id(user_id), parse_id(character_id)
    authorize(logged_user, user_id)
    try:
        character = characters.get_character(user_id, character_id)
    except NoSuchCharacter as e:
        raise NotFound('No such character') from e
    return domain.to_dict(character), status.OK, {}


def create_character(logged_user: domain.LoggedUser, user_id: str,
                     payload: Optional[Any]) -> ResponseData:
    user_id = parse_id(user_id)
    authorize(logged_user, user_id)
    data = get_payload(payload)
    name, = require(data, 'name')
    description = optional(data, 'description', '')
    try:
        character = characters.create_character(
            user_id, name, description, updated_by=logged_user.email
        )
    except NoSuchUser as e:
        raise NotFound('No such user') from e
    return domain.to_dict(character), status.CREATED, {}


def update_character(logged_user: domain.LoggedUser, user_id: str,
                     character_id: str,
                     payload: Optional[Any]) -> ResponseData:
    user_id, character_id = parse_id(user_id), parse_id(character_id)
    authorize(logged_user, user_id)
    data = get_payload(payload)
    name, = require(data, 'name')
    description = optional(data, 'description', '')
    try:
        character = characters.update_character(
            user_id, character_id, name, description,
            updated_by=logged_user.email
        )
    except NoSuchCharacter as e:
        raise NotFound('No such character') from e
    return domain.to_dict(character), status.OK, {}


def delete_character(logged_user: domain.LoggedUser, user_id: str,
                     character_id: str) -> ResponseData:
    user_id, character_id = parse_id(user_id), parse_id(character_id)
    authorize(logged_user, user_id)
    try:
        characters.delete_character(user_id, character_id)
    except NoSuchCharacter as e:
        raise NotFound('No such character') from e
    return None, status.OK, {}
