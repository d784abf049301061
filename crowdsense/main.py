import argparse
import json
import sys


def build_components(profile: str, overrides):
    from crowdsense.common.config import ConfigManager
    from crowdsense.common.logging import setup_logger
    from crowdsense.crowd.application.builder import CrowdApplicationBuilder

    cfg = ConfigManager().load_crowd_config(profile, overrides=overrides)
    setup_logger("crowdsense", cfg.log_level)
    return cfg, CrowdApplicationBuilder(cfg).get_components()


def main(argv=None):
    """
    Command line entry point. Arguments of the form key=value are treated as
    OmegaConf dot-list overrides, e.g. `storage.type=memory forecast.seed=7`.
    """
    parser = argparse.ArgumentParser(description="CrowdSense - crowd congestion scoring and redirection")
    parser.add_argument('--profile', default='default', help="Config profile under conf/crowd/")
    sub = parser.add_subparsers(dest='command', required=True)

    analyze = sub.add_parser('analyze', help="Analyze one spot, or every known spot")
    analyze.add_argument('spot', nargs='?', help="Spot name, e.g. 'Ooty Lake'")

    predict = sub.add_parser('predict', help="Hourly predictions for the next 24 hours")
    predict.add_argument('spot')
    predict.add_argument('--base-score', type=float, default=None)

    validate = sub.add_parser('validate', help="Redirect decision for a destination")
    validate.add_argument('spot_id', help="Spot id, e.g. 'ooty-lake'")

    sub.add_parser('serve', help="Run the HTTP API")

    argv = sys.argv[1:] if argv is None else list(argv)
    overrides = [a for a in argv if "=" in a and not a.startswith("-")]
    args = parser.parse_args([a for a in argv if a not in overrides])

    from crowdsense.common.exceptions import ConfigurationError
    from crowdsense.common.schemas import (
        HourlyPredictionSchema, RedirectDecisionSchema, SpotAnalysisSchema,
    )

    try:
        cfg, components = build_components(args.profile, overrides)
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    service = components["service"]

    if args.command == 'analyze':
        if args.spot:
            result = SpotAnalysisSchema.from_domain(service.analyze_spot(args.spot)).model_dump(by_alias=True)
        else:
            result = [SpotAnalysisSchema.from_domain(a).model_dump(by_alias=True) for a in service.analyze_all()]
    elif args.command == 'predict':
        result = [
            HourlyPredictionSchema.from_domain(p).model_dump(by_alias=True)
            for p in service.predict_next_24_hours(args.spot, args.base_score)
        ]
    elif args.command == 'validate':
        result = RedirectDecisionSchema.from_domain(service.validate_destination(args.spot_id)).model_dump(by_alias=True)
    else:
        import uvicorn
        from crowdsense.crowd.presentation.api import app, init_app

        init_app(components)
        print(f"Starting server at http://{cfg.server.host}:{cfg.server.port}")
        uvicorn.run(app, host=cfg.server.host, port=cfg.server.port)
        return 0

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
