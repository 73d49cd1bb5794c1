"""Unit tests for the immutable scene model and builder."""

from __future__ import annotations

import unittest

import numpy as np

from mirror_core.scene import ENTITY_SIZE, MIRROR_SIZE, Entity, Mirror, Player, Scene, SceneBuilder, make_mirror


class SceneBuilderTests(unittest.TestCase):
    def test_ids_follow_insertion_order(self) -> None:
        scene = (
            SceneBuilder()
            .add_player((400, 300))
            .add_entity((375, 264))
            .add_entity((400, 250))
            .add_mirror((300, 200), (300, 400))
            .add_mirror((500, 200), (500, 400))
            .build()
        )
        self.assertEqual([e.id for e in scene.entities], ["entity_1", "entity_2"])
        self.assertEqual([m.id for m in scene.mirrors], ["mirror_1", "mirror_2"])
        self.assertTrue(np.allclose(scene.player.position, [400.0, 300.0]))

    def test_builder_steps_do_not_share_state(self) -> None:
        base = SceneBuilder().add_player((0, 0))
        a = base.add_entity((1, 1))
        b = base.add_mirror((0, 1), (1, 1))
        self.assertEqual(len(base.entities), 0)
        self.assertEqual(len(a.entities), 1)
        self.assertEqual(len(b.entities), 0)

    def test_build_requires_player(self) -> None:
        with self.assertRaises(ValueError):
            SceneBuilder().add_entity((1, 1)).build()


class SceneTests(unittest.TestCase):
    def test_duplicate_ids_rejected(self) -> None:
        p = Player(position=(0, 0))
        with self.assertRaises(ValueError):
            Scene(player=p, entities=(Entity("e", (1, 1)), Entity("e", (2, 2))))
        with self.assertRaises(ValueError):
            Scene(player=p, mirrors=(Mirror("m", (0, 0), (1, 0)), Mirror("m", (0, 1), (1, 1))))

    def test_viewer_id_is_reserved(self) -> None:
        with self.assertRaises(ValueError):
            Scene(player=Player(position=(0, 0)), entities=(Entity("player", (1, 1)),))

    def test_entity_and_mirror_may_share_an_id(self) -> None:
        scene = Scene(player=Player(position=(0, 0)), entities=(Entity("x", (1, 1)),), mirrors=(Mirror("x", (0, 0), (1, 0)),))
        self.assertEqual(scene.find_object("x").id, "x")
        self.assertEqual(scene.find_mirror("x").id, "x")

    def test_find_object(self) -> None:
        scene = SceneBuilder().add_player((5, 5)).add_entity((1, 1)).build()
        self.assertIs(scene.find_object("player"), scene.player)
        self.assertIs(scene.find_object("entity_1"), scene.entities[0])
        self.assertIsNone(scene.find_object("entity_9"))

    def test_positions_are_read_only_copies(self) -> None:
        pos = np.array([1.0, 2.0])
        entity = Entity("e", pos)
        pos[0] = 99.0
        self.assertEqual(float(entity.position[0]), 1.0)
        with self.assertRaises(ValueError):
            entity.position[0] = 5.0

    def test_entity_vertices_follow_position(self) -> None:
        e = Entity("e", (100.0, 50.0))
        apex, left, right = e.vertices
        self.assertTrue(np.allclose(apex, [100.0, 50.0 - ENTITY_SIZE]))
        self.assertTrue(np.allclose(left, [100.0 - ENTITY_SIZE, 50.0 + ENTITY_SIZE]))
        self.assertTrue(np.allclose(right, [100.0 + ENTITY_SIZE, 50.0 + ENTITY_SIZE]))

    def test_make_mirror_is_horizontal(self) -> None:
        m = make_mirror((10.0, 20.0), "mirror_7")
        self.assertTrue(np.allclose(m.start, [10.0 - MIRROR_SIZE, 20.0]))
        self.assertTrue(np.allclose(m.end, [10.0 + MIRROR_SIZE, 20.0]))

    def test_bad_point_shape_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Player(position=(1.0, 2.0, 3.0))


if __name__ == "__main__":
    unittest.main()
