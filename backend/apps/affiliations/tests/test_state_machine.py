"""
State machine tests.
Legal and illegal transitions must raise appropriate errors.
"""

from django.test import SimpleTestCase

from apps.affiliations.state_machine import (
    CLIENT_LINK,
    EMPLOYMENT,
    TRANSFER,
    TRANSFER_TRANSITIONS,
    is_terminal_state,
    validate_transition,
)
from core.exceptions import InvalidStateError


class StateMachineTransitionTests(SimpleTestCase):
    def test_legal_affiliation_transitions(self):
        validate_transition(EMPLOYMENT, "ACTIVE", "INACTIVE")
        validate_transition(CLIENT_LINK, "ACTIVE", "INACTIVE")

    def test_inactive_is_terminal(self):
        for entity in (EMPLOYMENT, CLIENT_LINK):
            with self.assertRaises(InvalidStateError) as ctx:
                validate_transition(entity, "INACTIVE", "ACTIVE")
            self.assertIn("terminal", str(ctx.exception).lower())
            self.assertEqual(ctx.exception.code, "INVALID_STATE")

    def test_legal_transfer_transitions(self):
        validate_transition(TRANSFER, "PENDING", "APPROVED")
        validate_transition(TRANSFER, "PENDING", "REJECTED")
        validate_transition(TRANSFER, "PENDING", "CANCELED")

    def test_pending_to_pending_is_invalid(self):
        with self.assertRaises(InvalidStateError) as ctx:
            validate_transition(TRANSFER, "PENDING", "PENDING")
        self.assertIn("Invalid transition", str(ctx.exception))

    def test_terminal_transfer_states_reject_every_transition(self):
        terminals = [s for s, targets in TRANSFER_TRANSITIONS.items() if not targets]
        self.assertEqual(set(terminals), {"APPROVED", "REJECTED", "CANCELED"})
        for current in terminals:
            self.assertTrue(is_terminal_state(TRANSFER, current))
            for target in TRANSFER_TRANSITIONS:
                with self.assertRaises(InvalidStateError):
                    validate_transition(TRANSFER, current, target)

    def test_unknown_current_status(self):
        with self.assertRaises(InvalidStateError):
            validate_transition(TRANSFER, "DRAFT", "APPROVED")

    def test_unknown_entity_type(self):
        with self.assertRaises(ValueError):
            validate_transition("Vendor", "ACTIVE", "INACTIVE")
