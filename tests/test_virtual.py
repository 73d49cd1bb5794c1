"""Unit tests for the method-of-images virtual image generator."""

from __future__ import annotations

import unittest

import numpy as np

from mirror_core.scene import SceneBuilder
from mirror_core.virtual import (
    Room,
    VirtualImage,
    VirtualImageConfig,
    calculate_virtual_images,
    max_room_count,
    reflect_scene_room,
)
from scenarios.P2_two_mirrors import build_scene as two_mirror_scene
from scenarios.P3_three_mirrors import build_scene as three_mirror_scene

HUGE = (1e6, 1e6)


class VirtualImageTests(unittest.TestCase):
    def test_single_mirror_player_image(self) -> None:
        scene = SceneBuilder().add_player((400, 300)).add_mirror((300, 200), (300, 400)).build()
        images = calculate_virtual_images(scene, (400, 300))
        players = [im for im in images if im.original_type == "player"]
        self.assertEqual(len(players), 1)
        im = players[0]
        self.assertEqual(im.original_id, "player")
        self.assertTrue(np.allclose(im.position, [200.0, 300.0]))
        self.assertEqual(im.mirror_chain, ("mirror_1",))
        self.assertEqual(im.bounces, 1)
        self.assertEqual(im.virtual_room, 1)
        self.assertTrue(im.is_visible)

    def test_mirror_reflected_in_itself_is_emitted(self) -> None:
        scene = SceneBuilder().add_player((400, 300)).add_mirror((300, 200), (300, 400)).build()
        images = calculate_virtual_images(scene, (400, 300))
        mirrors = [im for im in images if im.original_type == "mirror"]
        self.assertEqual(len(mirrors), 1)
        self.assertIsNotNone(mirrors[0].segment)
        self.assertTrue(np.allclose(mirrors[0].position, [300.0, 300.0]))

    def test_no_mirrors_no_images(self) -> None:
        scene = SceneBuilder().add_player((400, 300)).add_entity((10, 10)).build()
        self.assertEqual(calculate_virtual_images(scene, HUGE), ())

    def test_two_mirrors_depth_first_order(self) -> None:
        images = calculate_virtual_images(two_mirror_scene(), HUGE)
        self.assertEqual(len(images), 20)
        chains = []
        for im in images:
            if not chains or chains[-1] != im.mirror_chain:
                chains.append(im.mirror_chain)
        self.assertEqual(
            chains,
            [("mirror_1",), ("mirror_1", "mirror_2"), ("mirror_2",), ("mirror_2", "mirror_1")],
        )

    def test_room_emits_player_entities_then_mirrors(self) -> None:
        images = calculate_virtual_images(two_mirror_scene(), HUGE)
        first_room = [im.original_type for im in images[:5]]
        self.assertEqual(first_room, ["player", "entity", "entity", "mirror", "mirror"])
        self.assertEqual([im.original_id for im in images[1:3]], ["entity_1", "entity_2"])

    def test_two_bounce_player_position(self) -> None:
        images = calculate_virtual_images(two_mirror_scene(), HUGE)
        im = next(im for im in images if im.original_type == "player" and im.mirror_chain == ("mirror_1", "mirror_2"))
        self.assertTrue(np.allclose(im.position, [800.0, 300.0]))
        self.assertEqual(im.bounces, 2)

    def test_chains_never_repeat_a_mirror(self) -> None:
        images = calculate_virtual_images(three_mirror_scene(), HUGE)
        self.assertEqual(len(images), 15 * 6)
        for im in images:
            self.assertEqual(len(set(im.mirror_chain)), len(im.mirror_chain))
            self.assertLessEqual(len(im.mirror_chain), 3)
            self.assertEqual(im.bounces, len(im.mirror_chain))

    def test_bounds_filter_images(self) -> None:
        scene = two_mirror_scene()
        bounds = np.array([400.0, 300.0])
        images = calculate_virtual_images(scene, bounds)
        self.assertLess(len(images), 20)
        for im in images:
            points = [im.position] if im.segment is None else [im.segment.start, im.segment.end, im.position]
            self.assertTrue(any(-400.0 <= x <= 800.0 and -300.0 <= y <= 600.0 for x, y in points))
        # mirror_2 seen through mirror_1 then mirror_2 lies wholly at x = 900.
        dropped = [
            im
            for im in images
            if im.original_type == "mirror" and im.original_id == "mirror_2" and im.mirror_chain == ("mirror_1", "mirror_2")
        ]
        self.assertEqual(dropped, [])
        self.assertEqual(sum(im.original_type == "mirror" for im in images), 7)

    def test_mirror_image_kept_when_only_an_endpoint_is_inside(self) -> None:
        scene = SceneBuilder().add_player((400, 300)).add_mirror((300, 0), (300, 2000)).build()
        images = calculate_virtual_images(scene, (400, 300))
        mirrors = [im for im in images if im.original_type == "mirror"]
        self.assertEqual(len(mirrors), 1)
        self.assertTrue(np.allclose(mirrors[0].position, [300.0, 1000.0]))
        self.assertTrue(np.allclose(mirrors[0].segment.start, [300.0, 0.0]))

    def test_max_depth_caps_rooms(self) -> None:
        scene = two_mirror_scene()
        self.assertEqual(len(calculate_virtual_images(scene, HUGE, VirtualImageConfig(max_depth=1))), 10)
        self.assertEqual(calculate_virtual_images(scene, HUGE, VirtualImageConfig(max_depth=0)), ())

    def test_max_depth_validation(self) -> None:
        with self.assertRaises(ValueError):
            VirtualImageConfig(max_depth=-1)

    def test_zero_length_mirror_does_not_raise(self) -> None:
        scene = (
            SceneBuilder()
            .add_player((400, 300))
            .add_mirror((300, 200), (300, 400))
            .add_mirror((500, 300), (500, 300))
            .build()
        )
        images = calculate_virtual_images(scene, (800, 600))
        self.assertGreater(len(images), 0)
        im = next(im for im in images if im.original_type == "player" and im.mirror_chain == ("mirror_2",))
        self.assertTrue(np.allclose(im.position, [400.0, 300.0]))

    def test_input_scene_is_untouched(self) -> None:
        scene = two_mirror_scene()
        before = scene.player.position.copy()
        calculate_virtual_images(scene, HUGE)
        self.assertTrue(np.allclose(scene.player.position, before))


class RoomTests(unittest.TestCase):
    def test_reflect_room_keeps_ids(self) -> None:
        scene = two_mirror_scene()
        room = reflect_scene_room(Room.from_scene(scene), scene.mirrors[0])
        self.assertEqual([e.id for e in room.entities], ["entity_1", "entity_2"])
        self.assertEqual([m.id for m in room.mirrors], ["mirror_1", "mirror_2"])
        self.assertTrue(np.allclose(room.mirrors[1].start, [100.0, 200.0]))
        self.assertTrue(np.allclose(room.player.position, [200.0, 300.0]))

    def test_max_room_count(self) -> None:
        self.assertEqual([max_room_count(m) for m in range(5)], [0, 1, 4, 15, 64])
        self.assertEqual(max_room_count(4, max_depth=2), 16)
        self.assertEqual(max_room_count(3, max_depth=0), 0)

    def test_image_position_is_read_only(self) -> None:
        im = VirtualImage("player", "player", (1.0, 2.0), 1, ["mirror_1"])
        self.assertEqual(im.mirror_chain, ("mirror_1",))
        with self.assertRaises(ValueError):
            im.position[0] = 3.0


if __name__ == "__main__":
    unittest.main()
