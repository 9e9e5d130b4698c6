# tests/arch/chip8/test_framebuffer_keypad.py
"""
フレームバッファと入力ラッチの単体テスト。
"""
import unittest

from chip8_tracer.arch.chip8.framebuffer import Framebuffer
from chip8_tracer.arch.chip8.keypad import Keypad


class TestFramebuffer(unittest.TestCase):
    # @intent:test_case_xor xor_pixelがセルを反転し、反転前の点灯を衝突として返すことを検証します。
    def test_xor_pixel_reports_collision(self):
        fb = Framebuffer()
        self.assertFalse(fb.xor_pixel(3, 4))
        self.assertEqual(fb.get_pixel(3, 4), 1)
        self.assertTrue(fb.xor_pixel(3, 4))
        self.assertEqual(fb.get_pixel(3, 4), 0)

    # @intent:test_case_view cellsは内部配列のコピーであることを検証します。
    def test_cells_is_read_only_view(self):
        fb = Framebuffer(8, 2)
        cells = fb.cells
        fb.xor_pixel(0, 0)
        self.assertEqual(cells[0], 0)
        self.assertEqual(fb.cells[0], 1)
        self.assertIsInstance(fb.cells, bytes)

    def test_clear_sets_dirty(self):
        fb = Framebuffer(8, 2)
        fb.xor_pixel(7, 1)
        fb.clear()
        self.assertEqual(fb.cells, bytes(16))
        self.assertTrue(fb.dirty)

    def test_rows(self):
        fb = Framebuffer(4, 2)
        fb.xor_pixel(1, 1)
        self.assertEqual([bytes(r) for r in fb.rows()], [bytes(4), bytes([0, 1, 0, 0])])


class TestKeypad(unittest.TestCase):
    # @intent:test_case_first_held first_heldが最小の押下キーを返すことを検証します。
    def test_first_held(self):
        keypad = Keypad()
        self.assertIsNone(keypad.first_held())
        keypad.key_down(0xC)
        keypad.key_down(0x3)
        self.assertEqual(keypad.first_held(), 0x3)
        keypad.key_up(0x3)
        self.assertEqual(keypad.first_held(), 0xC)

    # @intent:test_case_mask is_heldはキー番号の下位4bitで判定することを検証します。
    def test_is_held_masks_index(self):
        keypad = Keypad()
        keypad.key_down(0x2)
        self.assertTrue(keypad.is_held(0x12))
        self.assertFalse(keypad.is_held(0x3))

    def test_invalid_key(self):
        keypad = Keypad()
        with self.assertRaises(ValueError):
            keypad.key_down(16)
        with self.assertRaises(ValueError):
            keypad.key_down("1")


if __name__ == '__main__':
    unittest.main()
