#!/usr/bin/env python
"""
RELAYVAULT LIVE DEMO

Walks through the full relay key flow:
- Nodes generate RSA key pairs and publish them to the registry
- Duplicate ids / keys are rejected with a conflict
- A sender looks up a node and seals an envelope for it
- The node opens the envelope; a stranger cannot
- Audit log of everything that happened

Run with --no-pause to skip the presenter pauses.
"""

import logging
import sys

from relayvault.core_crypto.codec import encode, decode
from relayvault.core_crypto.errors import DecryptionError, PayloadTooLargeError
from relayvault.keys.rsa_keys import generate_rsa_key_pair, rsa_encrypt, max_plaintext_size
from relayvault.messaging.envelope import SealedEnvelope, seal_envelope, open_envelope
from relayvault.registry.service import RegistryService
from relayvault.integration.event_logger import EventLogger


PAUSE = "--no-pause" not in sys.argv


def print_header(title):
    """Print a formatted section header"""
    print("\n" + "═" * 70)
    print(f"  {title}")
    print("═" * 70)


def print_step(step_num, description):
    print(f"\n  [{step_num}] {description}")


def pause(message="Press ENTER to continue..."):
    """Pause for presenter to explain"""
    if PAUSE:
        print(f"\n  [PAUSE] {message}")
        input()


def main():
    logging.basicConfig(level=logging.INFO, format="  %(levelname)s %(name)s: %(message)s")

    print("\n")
    print("╔" + "═" * 68 + "╗")
    print("║" + "RELAYVAULT - RELAY KEY DIRECTORY & SEALED ENVELOPES".center(68) + "║")
    print("╚" + "═" * 68 + "╝")

    events = EventLogger("demo")
    service = RegistryService(event_logger=events)

    print_header("PART 1: NODE REGISTRATION")

    nodes = {}
    for node_id in (1, 2, 3):
        print_step(node_id, f"Node {node_id} generates an RSA-2048 key pair")
        pair = generate_rsa_key_pair()
        nodes[node_id] = pair
        response = service.handle("POST", "/registerNode",
                                  {'nodeId': node_id, 'pubKey': pair.public_text()})
        print(f"      -> {response.status} {response.body['message']}")

    print_step(4, "Node 4 tries to reuse node 1's public key")
    response = service.handle("POST", "/registerNode",
                              {'nodeId': 4, 'pubKey': nodes[1].public_text()})
    print(f"      -> {response.status} {response.body['message']}")

    print_step(5, "Registry status")
    print(f"      -> {service.handle('GET', '/status').body}")

    pause()

    print_header("PART 2: RSA SIZE LIMIT")

    limit = max_plaintext_size(nodes[2].public_key)
    print(f"\n  RSA-OAEP/SHA-256 with a 2048-bit key carries at most {limit} bytes")
    try:
        rsa_encrypt(encode(b"x" * (limit + 1)), nodes[2].public_text())
    except PayloadTooLargeError as exc:
        print(f"  {limit + 1} bytes rejected: {exc}")

    pause()

    print_header("PART 3: SEALED ENVELOPE")

    directory = service.handle("GET", "/getNodeRegistry").body['nodes']
    target = next(n for n in directory if n['nodeId'] == 2)
    message = "Route this through node 2. " * 20

    sealed = seal_envelope(message, target['pubKey'], event_logger=events)
    wire = sealed.to_text()
    print(f"\n  Plaintext size:     {len(message)} characters")
    print(f"  Wrapped AES key:    {len(decode(sealed.encrypted_key))} bytes")
    print(f"  Envelope on wire:   {len(wire)} characters")

    opened = open_envelope(SealedEnvelope.from_text(wire), nodes[2].private_key, event_logger=events)
    print(f"  Node 2 decrypted:   {'✓ PASS' if opened == message else '✗ FAIL'}")

    try:
        open_envelope(wire, nodes[3].private_key, event_logger=events)
        print("  Node 3 decrypted:   ✗ FAIL (should not be possible)")
    except DecryptionError:
        print("  Node 3 rejected:    ✓ PASS")

    pause()

    events.print_audit_log()


if __name__ == "__main__":
    main()
