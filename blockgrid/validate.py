from numbers import Real
from typing import Any, List, Mapping

from .store import layout_section, position_id


class ValidationError(Exception):
    pass


_GRID_POSITIVE = ('columns', 'rowHeight', 'stepX', 'stepY')
_POSITION_INTS = ('x', 'y', 'w', 'h', 'z')

EVENT_KINDS = ('down', 'move', 'up', 'wheel', 'hover', 'zoom', 'mode', 'select')


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer()


def validate_block_data(data: Any) -> None:
    if not isinstance(data, Mapping):
        raise ValidationError('[$] block data must be an object')
    key, layout = layout_section(data)
    where = f'$.{key}'

    for name in _GRID_POSITIVE:
        if name in layout and not (_is_number(layout[name]) and layout[name] > 0):
            raise ValidationError(f'[{where}.{name}] must be a positive number')
    if 'columns' in layout and not _is_int(layout['columns']):
        raise ValidationError(f'[{where}.columns] must be an integer')
    if 'padding' in layout and not (_is_number(layout['padding']) and layout['padding'] >= 0):
        raise ValidationError(f'[{where}.padding] must be a non-negative number')

    positions = layout.get('positions', [])
    if not isinstance(positions, list):
        raise ValidationError(f'[{where}.positions] must be a list')

    columns = layout.get('columns')
    seen = set()
    for index, position in enumerate(positions):
        here = f'{where}.positions[{index}]'
        if not isinstance(position, Mapping):
            raise ValidationError(f'[{here}] position must be an object')
        for name in _POSITION_INTS:
            value = position.get(name)
            if value is not None and not _is_int(value):
                raise ValidationError(f'[{here}.{name}] must be an integer')
        for name in ('w', 'h'):
            value = position.get(name)
            if value is not None and value < 1:
                raise ValidationError(f'[{here}.{name}] must be at least 1')
        if (position.get('x') or 0) < 0 or (position.get('y') or 0) < 0:
            raise ValidationError(f'[{here}] x and y must be non-negative')
        if columns is not None and (position.get('x') or 0) + (position.get('w') or 1) > columns:
            raise ValidationError(f'[{here}] extends past column {columns}')
        pid = position_id(position, index)
        if pid in seen:
            raise ValidationError(f'[{here}] duplicate position id "{pid}"')
        seen.add(pid)


def validate_script(events: Any) -> None:
    if not isinstance(events, list):
        raise ValidationError('[$] gesture script must be a list of events')
    for index, event in enumerate(events):
        here = f'$[{index}]'
        if not isinstance(event, Mapping):
            raise ValidationError(f'[{here}] event must be an object')
        kind = event.get('type')
        if kind not in EVENT_KINDS:
            raise ValidationError(f'[{here}.type] unknown event type {kind!r}')
        if kind in ('down', 'move', 'up'):
            for name in ('x', 'y'):
                if not _is_number(event.get(name)):
                    raise ValidationError(f'[{here}.{name}] pointer events need numeric x and y')
            if kind == 'down' and ('handle' in event) != ('owner' in event):
                raise ValidationError(f'[{here}] handle and owner must be given together')
        elif kind == 'wheel':
            if not _is_number(event.get('deltaY')):
                raise ValidationError(f'[{here}.deltaY] wheel events need a numeric deltaY')
        elif kind == 'zoom':
            if event.get('direction') not in ('in', 'out'):
                raise ValidationError(f'[{here}.direction] zoom direction must be in|out')
        elif kind == 'mode':
            if not isinstance(event.get('mode'), str):
                raise ValidationError(f'[{here}.mode] mode must be a string')
        elif kind == 'select':
            ids: List[Any] = event.get('ids')  # type: ignore[assignment]
            if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
                raise ValidationError(f'[{here}.ids] select needs a list of ids')
        elif kind == 'hover':
            rid = event.get('id')
            if rid is not None and not isinstance(rid, str):
                raise ValidationError(f'[{here}.id] hover id must be a string or null')
