# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
tests/test_handshake.py

Unit tests for the handshake engine.

Covers:
- Response code classification
- Bounded read loops (retry exhaustion instead of blocking)
- Data frame accumulation across partial reads
- Full ACK -> data -> ACK -> EOT cycle and its failure modes
- Closed connection and transport error propagation
- Per-call state tracking and statistics
"""

import logging
import threading

import pytest

from pymm010.core.constants import CommandCode, ResponseCode
from pymm010.core.exceptions import (
    ChecksumError,
    ConnectionClosedError,
    FrameError,
    ResponseNotAckError,
    ResponseNotEotError,
    RetryExhaustedError,
    TransportError,
)
from pymm010.core.framing import build_request_frame
from pymm010.core.handshake import HandshakeEngine, HandshakeState

from . import ACK, NAK, EOT, response_frame, full_reply


class TestResponseCode:
    @pytest.mark.parametrize("raw,expected", [
        (b"\x06", ResponseCode.ACK),
        (b"\x15", ResponseCode.NACK),
        (b"\x04", ResponseCode.EOT),
        (b"\x7F", ResponseCode.ERROR),
        (b"\x00", ResponseCode.ERROR),
    ])
    def test_classification(self, engine, transport, raw, expected):
        transport.feed(raw)
        assert engine.read_response_code() is expected
        assert engine.last_code_byte == raw[0]

    def test_waits_through_empty_reads(self, engine, transport):
        transport.feed(b"", b"", b"\x06")
        assert engine.read_response_code() is ResponseCode.ACK
        assert transport.read_calls == 3

    def test_retry_exhausted(self, engine, transport, config):
        with pytest.raises(RetryExhaustedError) as exc:
            engine.read_response_code()
        assert exc.value.attempts == config.max_read_attempts
        assert transport.read_calls == config.max_read_attempts

    def test_transport_error_surfaces_immediately(self, engine, transport):
        transport.feed(b"", TransportError("line dropped"), b"\x06")
        with pytest.raises(TransportError):
            engine.read_response_code()
        assert transport.read_calls == 2

    def test_closed_connection(self, engine, transport):
        transport.close()
        with pytest.raises(ConnectionClosedError):
            engine.read_response_code()


class TestResponseData:
    def test_single_chunk(self, engine, transport):
        transport.feed(response_frame(b"\x20\x21\x22"))
        assert engine.read_response_data() == b"\x20\x21\x22"

    def test_byte_by_byte(self, engine, transport, config):
        frame = response_frame(b"\x20\x25")
        transport.feed(*[bytes([b]) for b in frame])
        engine.config = config.with_changes(max_read_attempts=len(frame))
        assert engine.read_response_data() == b"\x20\x25"

    def test_partial_reads_with_timeouts(self, engine, transport):
        frame = response_frame(b"\x20\x21\x22\x23")
        transport.feed(frame[:2], b"", frame[2:5], b"", frame[5:])
        assert engine.read_response_data() == b"\x20\x21\x22\x23"

    def test_incomplete_frame_exhausts_retries(self, engine, transport):
        frame = response_frame(b"\x20\x21")
        transport.feed(frame[:-2])
        with pytest.raises(RetryExhaustedError):
            engine.read_response_data()

    def test_bad_checksum(self, engine, transport):
        frame = bytearray(response_frame(b"\x20\x21"))
        frame[-1] ^= 0x10
        transport.feed(bytes(frame))
        with pytest.raises(ChecksumError):
            engine.read_response_data()

    def test_bad_start_marker(self, engine, transport):
        frame = bytearray(response_frame(b"\x20\x21"))
        frame[1] = 0x31
        transport.feed(bytes(frame))
        with pytest.raises(FrameError):
            engine.read_response_data()

    def test_payload_containing_text_end(self, engine, transport):
        transport.feed(response_frame(b"\x03\x00\x2A\x9C") + EOT)
        assert engine.read_response_data() == b"\x03\x00\x2A\x9C"
        assert engine.read_response_code() is ResponseCode.EOT

    def test_split_after_payload_text_end(self, engine, transport):
        frame = response_frame(b"\x03\x00\x2A\x9C")
        transport.feed(frame[:4], frame[4:6], frame[6:])
        assert engine.read_response_data() == b"\x03\x00\x2A\x9C"
        assert transport.read_calls == 3

    def test_bad_checksum_after_more_bytes(self, engine, transport):
        frame = bytearray(response_frame(b"\x20\x21"))
        frame[-1] ^= 0x10
        transport.feed(bytes(frame[:3]), bytes(frame[3:]))
        with pytest.raises(ChecksumError):
            engine.read_response_data()
        assert transport.read_calls == 3

    def test_leftover_bytes_kept_for_next_read(self, engine, transport):
        transport.feed(response_frame(b"\x20") + EOT)
        assert engine.read_response_data() == b"\x20"
        assert engine.read_response_code() is ResponseCode.EOT
        assert transport.read_calls == 1


class TestFullCycle:
    def test_happy_path(self, engine, transport):
        transport.feed(*full_reply(b"\x20\x21\x22"))
        assert engine.read_response() == b"\x20\x21\x22"
        assert transport.written == ACK
        assert engine.state is HandshakeState.COMPLETE

    def test_whole_reply_in_one_chunk(self, engine, transport):
        transport.feed(b"".join(full_reply(b"\x20\x23\x24")))
        assert engine.read_response() == b"\x20\x23\x24"
        assert transport.written == ACK

    def test_nack_instead_of_ack(self, engine, transport):
        transport.feed(NAK, response_frame(b"\x20"), EOT)
        with pytest.raises(ResponseNotAckError) as exc:
            engine.read_response()
        assert exc.value.code == 0x15
        assert transport.read_calls == 1
        assert transport.writes == []
        assert engine.state is HandshakeState.FAILED
        assert engine.failure is ResponseNotAckError

    def test_eot_instead_of_ack(self, engine, transport):
        transport.feed(EOT)
        with pytest.raises(ResponseNotAckError):
            engine.read_response()

    def test_unrecognized_first_code(self, engine, transport):
        transport.feed(b"\x55")
        with pytest.raises(ResponseNotAckError) as exc:
            engine.read_response()
        assert exc.value.code == 0x55

    def test_missing_eot(self, engine, transport):
        transport.feed(ACK, response_frame(b"\x20"), NAK)
        with pytest.raises(ResponseNotEotError) as exc:
            engine.read_response()
        assert exc.value.code == 0x15
        # host ACK was still sent before the closing code was read
        assert transport.written == ACK
        assert engine.failure is ResponseNotEotError

    def test_eot_never_arrives(self, engine, transport):
        transport.feed(ACK, response_frame(b"\x20"))
        with pytest.raises(RetryExhaustedError):
            engine.read_response()
        assert engine.state is HandshakeState.FAILED

    def test_ack_write_failure_strict(self, engine, transport):
        transport.feed(*full_reply(b"\x20"))
        transport.write_error = TransportError("write failed")
        with pytest.raises(TransportError):
            engine.read_response()
        assert engine.state is HandshakeState.FAILED

    def test_ack_write_failure_legacy(self, engine, transport, config, caplog):
        engine.config = config.with_changes(strict_ack=False)
        transport.feed(*full_reply(b"\x20"))
        transport.write_error = TransportError("write failed")
        with caplog.at_level(logging.WARNING, logger="pymm010.core.handshake"):
            assert engine.read_response() == b"\x20"
        assert "Acknowledgement write failed" in caplog.text


class TestRequests:
    def test_send_request_single_write(self, engine, transport):
        engine.send_request(CommandCode.DISPENSE, b"\x21")
        assert transport.writes == [build_request_frame(0x42, b"\x21")]

    def test_send_request_closed(self, engine, transport):
        transport.close()
        with pytest.raises(ConnectionClosedError):
            engine.send_request(CommandCode.STATUS)
        assert transport.writes == []

    def test_send_request_clears_stale_bytes(self, engine, transport):
        transport.feed(b"\x15\x15")
        engine.read_response_code()
        engine.send_request(CommandCode.STATUS)
        transport.feed(*full_reply(b"\x20"))
        assert engine.read_response() == b"\x20"

    def test_transact(self, engine, transport):
        transport.feed(*full_reply(b"\x20\x21"))
        assert engine.transact(CommandCode.PURGE) == b"\x20\x21"
        assert transport.writes == [build_request_frame(0x41), ACK]

    def test_transact_without_response(self, engine, transport):
        assert engine.transact(CommandCode.RESET, expect_response=False) is None
        assert transport.read_calls == 0
        assert engine.state is HandshakeState.COMPLETE

    def test_transact_write_failure(self, engine, transport):
        transport.write_error = TransportError("boom")
        with pytest.raises(TransportError):
            engine.transact(CommandCode.STATUS)
        assert engine.state is HandshakeState.FAILED
        assert transport.read_calls == 0

    def test_ack_and_nack(self, engine, transport):
        engine.ack()
        engine.nack()
        assert transport.writes == [ACK, NAK]


class TestStatistics:
    def test_counters(self, engine, transport):
        transport.feed(*full_reply(b"\x20"))
        engine.transact(CommandCode.STATUS)
        transport.feed(NAK)
        with pytest.raises(ResponseNotAckError):
            engine.transact(CommandCode.STATUS)
        assert engine.stats.snapshot() == {
            'frames_sent': 2,
            'frames_received': 1,
            'acks_sent': 1,
            'errors': 1,
        }


class TestTrafficLogging:
    def test_traffic_lines(self, transport, config, caplog):
        engine = HandshakeEngine(transport, config.with_changes(log_traffic=True))
        transport.feed(*full_reply(b"\x20\x21\x22"))
        with caplog.at_level(logging.INFO, logger="pymm010.traffic"):
            engine.transact(CommandCode.DISPENSE, b"\x21")
        messages = [r.getMessage() for r in caplog.records if r.name == "pymm010.traffic"]
        assert messages[0].startswith("-> 04 30 02 42 21 03")
        assert "<- ACK" in messages
        assert "<- 20 21 22" in messages
        assert "-> ACK" in messages
        assert messages[-1] == "<- EOT"

    def test_silent_by_default(self, engine, transport, caplog):
        transport.feed(*full_reply(b"\x20"))
        with caplog.at_level(logging.DEBUG, logger="pymm010.traffic"):
            engine.transact(CommandCode.STATUS)
        assert not [r for r in caplog.records if r.name == "pymm010.traffic"]


class TestLocking:
    def test_transact_serialized(self, engine, transport):
        """A transact started while the lock is held waits for it"""
        transport.feed(*full_reply(b"\x20"))
        done = threading.Event()

        def worker():
            engine.transact(CommandCode.STATUS)
            done.set()

        with engine.lock:
            thread = threading.Thread(target=worker)
            thread.start()
            assert not done.wait(0.05)
            assert transport.writes == []
        thread.join(timeout=2.0)
        assert done.is_set()
        assert len(transport.writes) == 2
