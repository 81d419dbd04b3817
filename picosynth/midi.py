"""MIDI note frequencies and the task that feeds MIDI into a synth."""

MIDI_MIN = 0
MIDI_MAX = 127

# Playback interval of the demo note sequence, in milliseconds.
NOTE_INTERVAL_MS = 286

MIDI_FREQUENCIES = (
    8.1758, 8.6610, 9.1770, 9.7227, 10.3009, 10.9134,
    11.5623, 12.2499, 12.9783, 13.7500, 14.5676, 15.4339,
    16.3516, 17.3239, 18.3540, 19.4454, 20.6017, 21.8268,
    23.1247, 24.4997, 25.9565, 27.5000, 29.1352, 30.8677,
    32.7032, 34.6478, 36.7081, 38.8909, 41.2034, 43.6535,
    46.2493, 48.9994, 51.9131, 55.0000, 58.2705, 61.7354,
    65.4064, 69.2957, 73.4162, 77.7817, 82.4069, 87.3071,
    92.4986, 97.9989, 103.826, 110.000, 116.541, 123.471,
    130.813, 138.591, 146.832, 155.563, 164.814, 174.614,
    184.997, 195.998, 207.652, 220.000, 233.082, 246.942,
    261.626, 277.183, 293.665, 311.127, 329.628, 349.228,
    369.994, 391.995, 415.305, 440.000, 466.164, 493.883,
    523.251, 554.365, 587.330, 622.254, 659.255, 698.456,
    739.989, 783.991, 830.609, 880.000, 932.328, 987.767,
    1046.50, 1108.73, 1174.66, 1244.51, 1318.51, 1396.91,
    1479.98, 1567.98, 1661.22, 1760.00, 1864.66, 1975.53,
    2093.00, 2217.46, 2349.32, 2489.02, 2637.02, 2793.83,
    2959.96, 3135.96, 3322.44, 3520.00, 3729.31, 3951.07,
    4186.01, 4434.92, 4698.63, 4978.03, 5274.04, 5587.65,
    5919.91, 6271.93, 6644.88, 7040.00, 7458.62, 7902.13,
    8372.018, 8869.844, 9397.273, 9956.063, 10548.080, 11175.300,
    11839.820, 12543.850,
)

NOTE_SEQUENCE = (
    74, 78, 81, 86, 90, 93, 98, 102, 57, 61, 66, 69, 73, 78, 81, 85,
    88, 92, 97, 100, 97, 92, 88, 85, 81, 78, 74, 69, 66, 62, 57, 62,
    66, 69, 74, 78, 81, 86, 90, 93, 97, 102, 97, 93, 90, 85, 81, 78,
    73, 68, 64, 61, 56, 61, 64, 68, 74, 78, 81, 86, 90, 93, 98, 102,
)


def midi_to_freq(midi_note):
    """Frequency in Hz of a MIDI note number; 0.0 outside 0..127."""
    if MIDI_MIN <= midi_note <= MIDI_MAX:
        return MIDI_FREQUENCIES[midi_note]
    return 0.0


class MidiHandler:
    """Passes incoming MIDI packets to a synth and plays a demo sequence out."""

    def __init__(self, synth, channel=0):
        self.synth = synth
        self.channel = channel
        self.note_pos = 0
        self.start_ms = 0

    def midi_task(self, packets, current_ms):
        """Handle received packets and return the MIDI messages due at ``current_ms``.

        Every packet is a 4-byte USB-MIDI event handed to the synth. Once per
        note interval the next note of the sequence is switched on and the
        previous one switched off; those two 3-byte messages are returned.
        """
        for packet in packets:
            self.synth.process_midi_packet(packet)

        if ((current_ms - self.start_ms) & 0xFFFFFFFF) < NOTE_INTERVAL_MS:
            return []
        self.start_ms = current_ms

        previous = (self.note_pos - 1) % len(NOTE_SEQUENCE)
        note_on = bytes([0x90 | self.channel, NOTE_SEQUENCE[self.note_pos], 127])
        note_off = bytes([0x80 | self.channel, NOTE_SEQUENCE[previous], 0])
        self.note_pos = (self.note_pos + 1) % len(NOTE_SEQUENCE)
        return [note_on, note_off]