from rest_framework import serializers


class TreasureMarkerSerializer(serializers.Serializer):
    base = serializers.FloatField()
    jitter = serializers.FloatField()


class RulesSerializer(serializers.Serializer):
    initial_balance = serializers.DecimalField(max_digits=18, decimal_places=2)
    house_edge = serializers.DecimalField(max_digits=6, decimal_places=4)
    crash_floor = serializers.DecimalField(max_digits=8, decimal_places=2)
    crash_cap = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    median_crash_point = serializers.DecimalField(max_digits=10, decimal_places=2)
    treasure_bonus = serializers.DecimalField(max_digits=5, decimal_places=2)
    treasure_markers = TreasureMarkerSerializer(many=True)
    curve_growth = serializers.FloatField()
    curve_target_seconds = serializers.FloatField()
    tick_interval = serializers.FloatField()
    start_on_bet = serializers.BooleanField()
    launch_delay = serializers.FloatField()
    betting_window = serializers.FloatField()
    post_round_delay = serializers.FloatField()
    history_limit = serializers.IntegerField()
    commands = serializers.ListField(child=serializers.CharField())
