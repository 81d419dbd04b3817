import pytest

from picosynth.midi import (
    MIDI_FREQUENCIES,
    NOTE_SEQUENCE,
    MidiHandler,
    midi_to_freq,
)


class RecordingSynth:
    def __init__(self):
        self.packets = []

    def process_midi_packet(self, packet):
        self.packets.append(list(packet))


@pytest.mark.parametrize("note, freq", [(69, 440.0), (60, 261.626), (0, 8.1758), (127, 12543.850)])
def test_midi_to_freq_known_notes(note, freq):
    assert midi_to_freq(note) == freq


@pytest.mark.parametrize("note", [128, 200, -1])
def test_midi_to_freq_out_of_range_is_zero(note):
    assert midi_to_freq(note) == 0.0


def test_frequency_table_is_increasing():
    freqs = [midi_to_freq(note) for note in range(128)]
    assert freqs == list(MIDI_FREQUENCIES)
    assert all(lo < hi for lo, hi in zip(freqs, freqs[1:]))


def test_octave_doubles_frequency():
    assert midi_to_freq(81) == pytest.approx(2 * midi_to_freq(69))


def test_packets_forwarded_to_synth():
    synth = RecordingSynth()
    handler = MidiHandler(synth)
    handler.midi_task([[0x09, 0x90, 60, 100], [0x08, 0x80, 60, 0]], 10)
    assert synth.packets == [[0x09, 0x90, 60, 100], [0x08, 0x80, 60, 0]]


def test_nothing_sent_before_interval():
    handler = MidiHandler(RecordingSynth())
    assert handler.midi_task([], 100) == []
    assert handler.note_pos == 0


def test_first_note_and_wrapped_note_off():
    handler = MidiHandler(RecordingSynth())
    messages = handler.midi_task([], 300)
    assert messages == [
        bytes([0x90, NOTE_SEQUENCE[0], 127]),
        bytes([0x80, NOTE_SEQUENCE[-1], 0]),
    ]
    assert handler.note_pos == 1


def test_sequence_advances_after_interval():
    handler = MidiHandler(RecordingSynth())
    handler.midi_task([], 300)
    assert handler.midi_task([], 400) == []
    messages = handler.midi_task([], 586)
    assert messages == [
        bytes([0x90, NOTE_SEQUENCE[1], 127]),
        bytes([0x80, NOTE_SEQUENCE[0], 0]),
    ]


def test_sequence_wraps_around():
    handler = MidiHandler(RecordingSynth())
    sent = [handler.midi_task([], 300 * (k + 1)) for k in range(len(NOTE_SEQUENCE) + 1)]
    assert handler.note_pos == 1
    assert sent[-1][0] == bytes([0x90, NOTE_SEQUENCE[0], 127])


def test_channel_in_status_byte():
    handler = MidiHandler(RecordingSynth(), channel=3)
    on, off = handler.midi_task([], 1000)
    assert on[0] == 0x93
    assert off[0] == 0x83