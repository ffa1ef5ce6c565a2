"""
Lift state machine tests

All runs use a plain simpy.Environment, so door and travel delays
elapse in simulated time only. Default timings: doors 1 s each way,
travel 3 s per floor.
"""

import pytest

from liftsim.core.exceptions import AlreadyAtFloor, InvalidDirection, LiftError, OutOfRangeFloor
from liftsim.core.lift import Lift
from liftsim.core.types import Direction, DoorState, HallCall, LiftStatus


def event_names(events):
    return [m['event'] for m in events]


def passing_floors(events):
    return [m['floor'] for m in events if m['event'] == 'passing_floor']


class TestConstruction:
    def test_initial_state(self, lift):
        assert lift.get_current_floor() == 0
        assert lift.get_door_state() == DoorState.CLOSED
        assert lift.get_direction() == Direction.IDLE
        assert lift.internal_requests == frozenset()
        assert lift.external_calls == ()
        assert not lift.is_busy()

    def test_defaults(self, env):
        lift = Lift(env)
        assert (lift.min_floor, lift.max_floor, lift.current_floor) == (0, 10, 0)

    def test_rejects_inverted_range(self, env):
        with pytest.raises(ValueError):
            Lift(env, min_floor=5, max_floor=1, start_floor=3)

    def test_rejects_start_outside_range(self, env):
        with pytest.raises(ValueError):
            Lift(env, min_floor=0, max_floor=10, start_floor=11)

    def test_rejects_travel_not_slower_than_doors(self, env):
        with pytest.raises(ValueError):
            Lift(env, door_open_time=1.0, door_close_time=1.0, floor_travel_time=1.0)

    def test_negative_floors(self, env):
        lift = Lift(env, min_floor=-2, max_floor=5, start_floor=0)
        env.run(until=lift.move_to_floor(-2))
        assert lift.get_current_floor() == -2
        assert env.now == 7


class TestRequestIntake:
    @pytest.mark.parametrize("floor", [-1, 11, 100])
    def test_out_of_range_leaves_state_unchanged(self, lift, floor):
        before = lift.get_status()
        with pytest.raises(OutOfRangeFloor):
            lift.press_button(floor)
        with pytest.raises(OutOfRangeFloor):
            lift.call_lift(floor, Direction.UP)
        with pytest.raises(OutOfRangeFloor):
            lift.move_to_floor(floor)
        assert lift.get_status() == before

    def test_out_of_range_error_details(self, lift):
        with pytest.raises(OutOfRangeFloor) as excinfo:
            lift.press_button(12)
        assert excinfo.value.floor == 12
        assert excinfo.value.message == "Floor 12 out of range (0-10)"
        assert isinstance(excinfo.value, ValueError)
        assert isinstance(excinfo.value, LiftError)

    def test_press_button_records_floor(self, lift, events):
        assert lift.press_button(5) is True
        assert lift.internal_requests == frozenset({5})
        assert events[-1]['event'] == 'car_call_registered'
        assert events[-1]['floor'] == 5

    def test_press_button_twice_is_idempotent(self, lift, events):
        lift.press_button(5)
        assert lift.press_button(5) is False
        assert lift.internal_requests == frozenset({5})
        assert event_names(events).count('car_call_registered') == 1

    def test_press_button_at_current_floor(self, lift):
        with pytest.raises(AlreadyAtFloor):
            lift.press_button(0)
        assert lift.internal_requests == frozenset()

    def test_call_lift_deduplicates(self, lift):
        assert lift.call_lift(4, Direction.UP) is True
        assert lift.call_lift(4, Direction.UP) is False
        assert lift.external_calls == (HallCall(4, Direction.UP),)

    def test_call_lift_keeps_insertion_order(self, lift):
        lift.call_lift(7, Direction.DOWN)
        lift.call_lift(4, Direction.UP)
        lift.call_lift(4, Direction.DOWN)
        assert lift.external_calls == (
            HallCall(7, Direction.DOWN),
            HallCall(4, Direction.UP),
            HallCall(4, Direction.DOWN),
        )

    def test_call_lift_at_current_floor_is_accepted(self, lift):
        assert lift.call_lift(0, Direction.UP) is True

    @pytest.mark.parametrize("floor", range(0, 11))
    def test_call_lift_rejects_idle(self, lift, floor):
        with pytest.raises(InvalidDirection):
            lift.call_lift(floor, Direction.IDLE)
        assert lift.external_calls == ()

    def test_call_lift_rejects_unknown_direction(self, lift):
        with pytest.raises(InvalidDirection):
            lift.call_lift(3, "sideways")
        assert lift.external_calls == ()

    def test_call_lift_accepts_direction_names(self, lift):
        lift.call_lift(3, "down")
        assert lift.external_calls == (HallCall(3, Direction.DOWN),)

    def test_range_checked_before_direction(self, lift):
        with pytest.raises(OutOfRangeFloor):
            lift.call_lift(20, Direction.IDLE)

    def test_request_collections_are_copies(self, lift):
        lift.press_button(3)
        requests = lift.internal_requests
        with pytest.raises(AttributeError):
            requests.add(4)
        assert lift.internal_requests == frozenset({3})


class TestDoors:
    def test_open_doors(self, env, lift, events):
        env.run(until=lift.open_doors())
        assert lift.get_door_state() == DoorState.OPEN
        assert env.now == 1
        names = event_names(events)
        assert names.index('doors_opening') < names.index('doors_open')
        assert events[names.index('doors_open')]['floor'] == 0

    def test_open_doors_when_open_is_noop(self, env, lift, events):
        env.run(until=lift.open_doors())
        env.run(until=lift.open_doors())
        assert env.now == 1
        assert lift.get_door_state() == DoorState.OPEN
        assert 'doors_already_open' in event_names(events)

    def test_close_doors(self, env, lift):
        env.run(until=lift.open_doors())
        env.run(until=lift.close_doors())
        assert lift.get_door_state() == DoorState.CLOSED
        assert env.now == 2

    def test_close_doors_when_closed_is_noop(self, env, lift, events):
        env.run(until=lift.close_doors())
        assert env.now == 0
        assert lift.get_door_state() == DoorState.CLOSED
        assert 'doors_already_closed' in event_names(events)
        assert 'doors_closing' not in event_names(events)

    def test_opening_serves_hall_call_at_current_floor(self, env, lift, events):
        lift.call_lift(0, Direction.UP)
        env.run(until=lift.open_doors())
        assert lift.external_calls == ()
        assert 'hall_call_fulfilled' in event_names(events)

    def test_requests_made_with_doors_open_wait_for_next_opening(self, env, lift):
        env.run(until=lift.open_doors())
        lift.call_lift(0, Direction.DOWN)
        assert lift.external_calls == (HallCall(0, Direction.DOWN),)

        env.run(until=lift.close_doors())
        assert lift.external_calls == (HallCall(0, Direction.DOWN),)

        env.run(until=lift.open_doors())
        assert lift.external_calls == ()


class TestMotion:
    def test_move_to_floor_final_state(self, env, lift):
        env.run(until=lift.move_to_floor(3))
        assert lift.get_current_floor() == 3
        assert lift.get_direction() == Direction.IDLE
        assert lift.get_door_state() == DoorState.OPEN
        assert env.now == 10  # 3 floors x 3 s + 1 s door opening
        assert lift.trips == 1
        assert lift.floors_travelled == 3

    def test_move_to_current_floor_rejected(self, lift):
        with pytest.raises(AlreadyAtFloor):
            lift.move_to_floor(0)

    def test_move_with_open_doors_closes_first(self, env, lift, events):
        env.run(until=lift.open_doors())
        events.clear()

        env.run(until=lift.move_to_floor(3))

        names = event_names(events)
        assert names.index('doors_closing') < names.index('doors_closed') < names.index('moving')
        assert names.index('arrived') < names.index('doors_open')
        assert lift.get_door_state() == DoorState.OPEN
        assert lift.get_current_floor() == 3
        assert env.now == 1 + 1 + 9 + 1

    def test_passing_notifications_upward(self, env, lift, events):
        env.run(until=lift.move_to_floor(4))
        assert passing_floors(events) == [1, 2, 3]

    def test_passing_notifications_downward(self, env, events):
        lift = Lift(env, start_floor=4, broker=None)
        lift.broker.subscribe(lambda topic, message: events.append(message))
        env.run(until=lift.move_to_floor(1))
        assert passing_floors(events) == [3, 2]

    def test_adjacent_floor_has_no_passing(self, env, lift, events):
        env.run(until=lift.move_to_floor(1))
        assert passing_floors(events) == []

    def test_direction_while_travelling(self, env, lift):
        lift.move_to_floor(5)
        env.run(until=4)
        assert lift.get_current_floor() == 1
        assert lift.get_direction() == Direction.UP
        assert lift.get_state() == "MOVING"
        assert lift.is_busy()

        env.run()
        assert lift.get_direction() == Direction.IDLE
        assert lift.get_state() == "IDLE"
        assert not lift.is_busy()

    def test_direction_down(self, env):
        lift = Lift(env, start_floor=8)
        lift.move_to_floor(2)
        env.run(until=1)
        assert lift.get_direction() == Direction.DOWN

    def test_requests_accepted_during_travel(self, env, lift):
        lift.move_to_floor(5)
        env.run(until=4)
        assert lift.press_button(8) is True
        assert lift.call_lift(2, Direction.UP) is True
        env.run()
        assert lift.internal_requests == frozenset({8})
        assert lift.external_calls == (HallCall(2, Direction.UP),)


class TestFulfillment:
    def test_press_then_move_fulfils(self, env, lift):
        lift.press_button(3)
        assert lift.internal_requests == frozenset({3})
        env.run(until=lift.move_to_floor(3))
        assert lift.get_current_floor() == 3
        assert lift.get_door_state() == DoorState.OPEN
        assert lift.internal_requests == frozenset()

    def test_hall_call_cleared_on_arrival_regardless_of_direction(self, env, lift):
        lift.call_lift(2, Direction.DOWN)
        assert lift.external_calls == (HallCall(2, Direction.DOWN),)
        env.run(until=lift.move_to_floor(2))
        assert lift.external_calls == ()

    def test_arrival_clears_all_requests_at_target(self, env, lift, events):
        lift.press_button(5)
        lift.call_lift(5, Direction.UP)
        lift.call_lift(5, Direction.DOWN)
        lift.call_lift(7, Direction.UP)

        env.run(until=lift.move_to_floor(5))

        # Direction is IDLE when the doors open, which matches both calls
        assert lift.internal_requests == frozenset()
        assert lift.external_calls == (HallCall(7, Direction.UP),)
        fulfilled = [(m['floor'], m['direction']) for m in events if m['event'] == 'hall_call_fulfilled']
        assert fulfilled == [(5, 'UP'), (5, 'DOWN')]

    def test_intermediate_floors_are_not_served(self, env, lift):
        lift.press_button(2)
        lift.press_button(5)
        lift.call_lift(3, Direction.UP)

        env.run(until=lift.move_to_floor(5))

        assert lift.internal_requests == frozenset({2})
        assert lift.external_calls == (HallCall(3, Direction.UP),)

    def test_fulfillment_happens_when_doors_open(self, env, lift):
        lift.press_button(1)
        lift.move_to_floor(1)
        env.run(until=3.5)  # arrived, doors still opening
        assert lift.get_current_floor() == 1
        assert lift.internal_requests == frozenset({1})
        env.run()
        assert lift.internal_requests == frozenset()


class TestMutualExclusion:
    def test_concurrent_moves_run_back_to_back(self, env, lift, events):
        first = lift.move_to_floor(3)
        second = lift.move_to_floor(1)

        env.run(until=second)

        assert first.triggered
        assert lift.get_current_floor() == 1
        assert lift.get_door_state() == DoorState.OPEN
        # first: 9 + 1, second: close 1 + travel 6 + open 1
        assert env.now == 18
        moves = [(m['from_floor'], m['to_floor']) for m in events if m['event'] == 'moving']
        assert moves == [(0, 3), (3, 1)]
        assert passing_floors(events) == [1, 2, 2]

    def test_sequences_never_overlap(self, env, lift, events):
        lift.move_to_floor(2)
        lift.close_doors()
        lift.open_doors()
        lift.move_to_floor(4)
        env.run()

        names = [n for n in event_names(events) if n in ('doors_opening', 'doors_open', 'doors_closing',
                                                         'doors_closed', 'moving', 'arrived')]
        assert names == [
            'moving', 'arrived', 'doors_opening', 'doors_open',
            'doors_closing', 'doors_closed',
            'doors_opening', 'doors_open',
            'doors_closing', 'doors_closed', 'moving', 'arrived', 'doors_opening', 'doors_open',
        ]
        assert env.now == 7 + 1 + 1 + 1 + 6 + 1

    def test_queued_move_to_reached_floor_does_nothing(self, env, lift, events):
        lift.move_to_floor(3)
        lift.move_to_floor(3)
        env.run()
        assert env.now == 10
        assert lift.get_current_floor() == 3
        assert lift.get_door_state() == DoorState.OPEN
        assert 'already_at_floor' in event_names(events)
        assert lift.trips == 1


class TestStatus:
    def test_status_snapshot(self, lift):
        lift.press_button(5)
        lift.press_button(2)
        lift.call_lift(4, Direction.UP)
        status = lift.get_status()
        assert isinstance(status, LiftStatus)
        assert status.current_floor == 0
        assert status.door_state == DoorState.CLOSED
        assert status.direction == Direction.IDLE
        assert status.internal_requests == (2, 5)
        assert status.external_calls == (HallCall(4, Direction.UP),)

    def test_status_is_not_affected_by_later_changes(self, env, lift):
        status = lift.get_status()
        lift.press_button(4)
        env.run(until=lift.move_to_floor(6))
        assert status.internal_requests == ()
        assert status.current_floor == 0
        assert lift.get_status().internal_requests == (4,)

    def test_get_status_has_no_side_effects(self, lift, events):
        lift.get_status()
        assert events == []

    def test_show_status_publishes_snapshot(self, lift, events):
        lift.press_button(7)
        status = lift.show_status()
        assert events[-1]['event'] == 'status'
        assert events[-1]['status'] == status.to_dict()
        assert events[-1]['status']['internal_requests'] == [7]

    def test_status_to_dict(self, lift):
        lift.call_lift(3, Direction.DOWN)
        data = lift.get_status().to_dict()
        assert data['door_state'] == 'CLOSED'
        assert data['direction'] == 'IDLE'
        assert data['external_calls'] == [{'floor': 3, 'direction': 'DOWN'}]
