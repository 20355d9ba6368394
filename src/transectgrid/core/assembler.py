from __future__ import annotations

from operator import attrgetter
from typing import Callable, Dict, Iterable, List, Optional, Union

from transectgrid.core.errors import InsufficientPointsError
from transectgrid.models import Line, Waypoint

KeyFunc = Union[str, Callable[[Waypoint], object]]


def _resolve(key: KeyFunc) -> Callable[[Waypoint], object]:
    return attrgetter(key) if isinstance(key, str) else key


def group_waypoints(
    waypoints: Iterable[Waypoint],
    group_key: KeyFunc,
    order_key: Optional[KeyFunc] = None,
) -> Dict[object, List[Waypoint]]:
    """
    Map each group key to its waypoints, keys in first-seen order.

    With order_key, each group is sorted ascending by it (stable, so ties keep input order).
    """
    get_group = _resolve(group_key)
    groups: Dict[object, List[Waypoint]] = {}
    for wp in waypoints:
        groups.setdefault(get_group(wp), []).append(wp)

    if order_key is not None:
        get_order = _resolve(order_key)
        for members in groups.values():
            members.sort(key=get_order)
    return groups


def build_line(key, members: List[Waypoint]) -> Line:
    if len(members) < 2:
        raise InsufficientPointsError(str(key), len(members))
    first = members[0]
    return Line(
        key=str(key),
        points=tuple(wp.point for wp in members),
        name=first.name,
        region=first.region,
    )


def assemble(
    waypoints: Iterable[Waypoint],
    group_key: KeyFunc,
    order_key: Optional[KeyFunc] = None,
) -> List[Line]:
    """One Line per group; raises InsufficientPointsError on any group with < 2 points."""
    groups = group_waypoints(waypoints, group_key, order_key)
    return [build_line(key, members) for key, members in groups.items()]
