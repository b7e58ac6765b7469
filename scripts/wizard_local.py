#!/usr/bin/env python3
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

"""
Interactive local wizard harness (no HTTP).

Usage:
  python3 scripts/wizard_local.py

What it does:
- Builds a WizardSession through the normal wiring (catalog from CATALOG_PATH)
- Lets you toggle products, move between steps and fill form fields
- Prints the active step, totals and navigation state after every command
"""

import os
import time

from quotewizard.application.exceptions import (
    EmptyOrderError,
    FormValidationError,
    StorefrontContractError,
    StorefrontUpstreamError,
)
from quotewizard.application.dto.wizard_view import WizardView
from quotewizard.wiring.dependencies import create_session


def _print_header(session_id: str) -> None:
    print("\nLocal Wizard Harness")
    print("-" * 60)
    print(f"session_id: {session_id}")
    print("Commands: /help for the list, /quit to exit")
    print("-" * 60)


def _print_help() -> None:
    print("Commands:")
    print("  pick <product_id>        -> toggle a product on the active step")
    print("  make|model|year <value>  -> vehicle picker")
    print("  set <field_id> <value>   -> fill a field on the active form step")
    print("  next | back | jump <n>   -> navigation")
    print("  submit | restart")
    print("  /new  -> start a new session")
    print("  /quit -> exit")


def _print_view(view: WizardView) -> None:
    step = view.step.step
    print("\n--- Progress ---")
    print(" ".join(f"[{p.id}:{p.status}]" for p in view.progress))
    print(f"active: {step.id if step else '(none)'}  accessible up to: {view.highest_accessible_index}")
    if step is not None:
        print(f"\n--- {step.title or step.id} ({step.selection_mode.value}) ---")
        for product in view.step.compatible:
            mark = "*" if product.id in view.step.selected_product_ids else " "
            print(f" {mark} {product.id}: {product.name} {product.price if product.price is not None else ''}")
        for product in view.step.incompatible:
            print(f"   ({product.id}: not compatible)")
        for field in step.fields:
            value = view.form_values.get(field.id, "")
            error = view.form_errors.get(field.id)
            print(f"   {field.id}={value!r}" + (f"  <- {error}" if error else ""))
        if view.step.helper_text:
            print(view.step.helper_text)
    print(f"\ntotal: {view.totals.total_price}  weight: {view.totals.total_weight}  channel: {view.channel}")
    if view.navigation.blocking_message:
        print(view.navigation.blocking_message)
    if view.status:
        print(f"({view.status.status}) {view.status.message}")
    if view.confirmation:
        receipt = view.confirmation.receipt
        print(f"Quote sent: {receipt.reference} {receipt.order_url or ''}")
    print("-" * 60)


def main() -> None:
    session_id = os.getenv("WIZARD_SESSION_ID", "local_session_1")
    session = create_session(session_id)
    _print_header(session_id)
    _print_view(session.view())

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue
        cmd, _, arg = user_text.partition(" ")
        cmd = cmd.lower()
        arg = arg.strip()

        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            _print_help()
            continue
        if cmd == "/new":
            session = create_session(f"local_session_{int(time.time())}")
            print(f"New session_id: {session.session_id}")
        elif cmd == "pick":
            active = session.engine.active_step()
            if active is not None:
                session.toggle_product(active.id, arg)
        elif cmd == "make":
            session.set_vehicle_make(arg)
        elif cmd == "model":
            session.set_vehicle_model(arg)
        elif cmd == "year":
            session.set_vehicle_year(arg)
        elif cmd == "set":
            active = session.engine.active_step()
            field_id, _, value = arg.partition(" ")
            if active is not None:
                session.set_field_value(active.id, field_id, value)
                session.blur_field(active.id, field_id)
        elif cmd == "next":
            if not session.go_next():
                print("(cannot move forward)")
        elif cmd == "back":
            session.go_previous()
        elif cmd == "jump":
            if not arg.isdigit() or not session.jump_to(int(arg)):
                print("(cannot jump there)")
        elif cmd == "submit":
            try:
                session.submit()
            except FormValidationError as e:
                print(f"Fix these fields: {', '.join(sorted(e.errors))}")
            except (EmptyOrderError, StorefrontUpstreamError, StorefrontContractError) as e:
                print(f"ERROR: {e}")
        elif cmd == "restart":
            session.restart()
        else:
            print("Unknown command, /help for the list")
            continue

        _print_view(session.view())


if __name__ == "__main__":
    main()
